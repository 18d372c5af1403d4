"""
Shared pytest fixtures for holidaybook tests.

Provides sample upstream payloads, mocked AWS services (DynamoDB) and
environment isolation.
"""

import os
import sys
from typing import Any, Dict, List

import boto3
import pytest
from moto import mock_aws

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from tests.helpers import TEST_CONFIG_TABLE, make_payload, make_record


# =============================================================================
# Environment Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Reset environment variables and cached settings between tests."""
    for key in [
        'HOLIDAY_API_URL', 'HOLIDAY_API_TIMEOUT', 'HOLIDAY_API_MAX_RETRIES',
        'HOLIDAY_TEST_DATA_PATH', 'CACHE_BACKEND', 'CACHE_DIR', 'CACHE_KEY',
        'CACHE_MAX_AGE_SECONDS', 'CONFIG_TABLE_NAME', 'OUTPUT_DIRECTORY',
        'START_DATE', 'YEARS_TO_GENERATE', 'AWS_LAMBDA_FUNCTION_NAME',
        'LOG_LEVEL',
    ]:
        monkeypatch.delenv(key, raising=False)

    monkeypatch.setenv('AWS_REGION', 'us-west-2')

    yield

    _reset_singletons()


def _reset_singletons():
    """Reset module-level singletons to ensure test isolation."""
    from holidaybook.settings import clear_settings_cache
    clear_settings_cache()

    lambda_module = sys.modules.get('lambda_handler')
    if lambda_module is not None:
        lambda_module.reset_lookup()


# =============================================================================
# AWS Mock Fixtures
# =============================================================================

@pytest.fixture
def aws_credentials(monkeypatch):
    """Mock AWS credentials for moto."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-west-2')


@pytest.fixture
def config_table(aws_credentials, monkeypatch):
    """Create a mocked DynamoDB config table."""
    monkeypatch.setenv('CONFIG_TABLE_NAME', TEST_CONFIG_TABLE)

    with mock_aws():
        dynamodb = boto3.resource('dynamodb', region_name='us-west-2')
        table = dynamodb.create_table(
            TableName=TEST_CONFIG_TABLE,
            KeySchema=[
                {'AttributeName': 'config_type', 'KeyType': 'HASH'},
                {'AttributeName': 'config_key', 'KeyType': 'RANGE'}
            ],
            AttributeDefinitions=[
                {'AttributeName': 'config_type', 'AttributeType': 'S'},
                {'AttributeName': 'config_key', 'AttributeType': 'S'}
            ],
            BillingMode='PAY_PER_REQUEST'
        )
        table.meta.client.get_waiter('table_exists').wait(TableName=TEST_CONFIG_TABLE)

        yield table


# =============================================================================
# Lambda Context Fixture
# =============================================================================

class MockLambdaContext:
    """Mock AWS Lambda context object."""

    def __init__(self, remaining_time_ms: int = 30000):
        self._remaining_time_ms = remaining_time_ms
        self.function_name = 'test-check-holiday'
        self.function_version = '$LATEST'
        self.invoked_function_arn = 'arn:aws:lambda:us-west-2:123456789:function:test-check-holiday'
        self.memory_limit_in_mb = 256
        self.aws_request_id = 'test-request-id'
        self.log_group_name = '/aws/lambda/test-check-holiday'
        self.log_stream_name = 'test-log-stream'

    def get_remaining_time_in_millis(self) -> int:
        return self._remaining_time_ms


@pytest.fixture
def lambda_context():
    return MockLambdaContext()


# =============================================================================
# Dataset Fixtures
# =============================================================================

@pytest.fixture
def sample_records() -> List[Dict[str, Any]]:
    """A few real-looking 2024 entries."""
    return [
        make_record("20240101", "開國紀念日", "是", "放假之紀念日及節日",
                    "全國各機關學校放假一日。", record_id=1),
        make_record("20240106", "", "是", "星期六、星期日", "", record_id=2),
        make_record("20240208", "小年夜", "是", "調整放假日", "", record_id=3),
        make_record("20240217", "補行上班日", "否", "補行上班日", "", record_id=4),
        make_record("20240903", "軍人節", "是", "特定節日",
                    "軍人依國防部規定放假。", record_id=5),
        make_record("20241010", "國慶日", "是", "放假之紀念日及節日", "", record_id=6),
    ]


@pytest.fixture
def sample_payload(sample_records) -> bytes:
    return make_payload(sample_records)
