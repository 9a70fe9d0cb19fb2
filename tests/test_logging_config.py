"""Tests for credential masking in log output."""

import logging

from common.logging_config import SensitiveDataFilter, register_secret, setup_logging


def make_record(msg, *args):
    return logging.LogRecord('metasearch.test', logging.INFO, __file__, 1, msg, args, None)


def test_masks_key_value_credentials():
    record = make_record('connecting with store_key=abc123 and api-key: xyz')

    SensitiveDataFilter().filter(record)

    assert 'abc123' not in record.getMessage()
    assert 'xyz' not in record.getMessage()
    assert 'store_key=***MASKED***' in record.getMessage()


def test_masks_bearer_tokens_in_args():
    record = make_record('header %s', 'Bearer s3cr3t')

    SensitiveDataFilter().filter(record)

    assert record.getMessage() == 'header Bearer ***MASKED***'


def test_masks_registered_secret_anywhere():
    log_filter = SensitiveDataFilter(secrets=['meili-master-key'])
    record = make_record('request to http://search?k=%s failed', 'meili-master-key')

    log_filter.filter(record)

    assert 'meili-master-key' not in record.getMessage()


def test_register_secret_on_configured_logger():
    logger = setup_logging('metasearch-logging-test')
    register_secret(logger, 'runtime-secret')

    record = make_record('value runtime-secret')
    for handler in logger.handlers:
        for log_filter in handler.filters:
            log_filter.filter(record)

    assert record.getMessage() == 'value ***MASKED***'


def test_setup_logging_is_idempotent():
    first = setup_logging('metasearch-idempotent-test')
    second = setup_logging('metasearch-idempotent-test')

    assert first is second
    assert len(second.handlers) == 1
