"""Shared fixtures for the Amplify Slack notifier tests."""

import datetime
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.stub import Stubber

VALID_WEBHOOK = "https://hooks.slack.com/services/T00/B00/xxx"


def make_response(body="ok", status_code=200):
    """Create a mock for the context manager returned by urllib.request.urlopen."""
    mock_resp = MagicMock()
    mock_resp.read.return_value = body.encode("utf-8")
    mock_resp.getcode.return_value = status_code
    mock_resp.__enter__ = MagicMock(return_value=mock_resp)
    mock_resp.__exit__ = MagicMock(return_value=False)
    return mock_resp


@pytest.fixture
def amplify_client():
    """Amplify client double answering all three lookups successfully."""
    client = MagicMock()
    client.get_app.return_value = {"app": {"appId": "app1", "name": "MyApp"}}
    client.list_domain_associations.return_value = {
        "domainAssociations": [{"domainName": "my.app.com"}, {"domainName": "other.app.com"}]
    }
    client.get_job.return_value = {"job": {"summary": {"jobId": "j1", "commitMessage": "Fix bug"}}}
    return client


@pytest.fixture
def failing_amplify_client():
    client = MagicMock()
    client.get_app.side_effect = RuntimeError("get_app boom")
    client.list_domain_associations.side_effect = RuntimeError("list boom")
    client.get_job.side_effect = RuntimeError("get_job boom")
    return client


@pytest.fixture
def scenario_event():
    return {
        "region": "us-east-1",
        "detail": {
            "appId": "app1",
            "branchName": "main",
            "jobId": "j1",
            "jobStatus": "SUCCEED",
        },
    }


def amplify_app_response(app_id="app1", name="MyApp"):
    now = datetime.datetime(2025, 1, 1, tzinfo=datetime.timezone.utc)
    return {
        "app": {
            "appId": app_id,
            "appArn": f"arn:aws:amplify:us-east-1:123456789012:apps/{app_id}",
            "name": name,
            "description": "",
            "repository": "https://github.com/example/my-app",
            "platform": "WEB",
            "createTime": now,
            "updateTime": now,
            "environmentVariables": {},
            "defaultDomain": f"{app_id}.amplifyapp.com",
            "enableBranchAutoBuild": True,
            "enableBasicAuth": False,
        }
    }


def amplify_domains_response(*domain_names):
    return {
        "domainAssociations": [
            {
                "domainAssociationArn": f"arn:aws:amplify:us-east-1:123456789012:apps/app1/domains/{name}",
                "domainName": name,
                "enableAutoSubDomain": False,
                "domainStatus": "AVAILABLE",
                "statusReason": "",
                "subDomains": [],
            }
            for name in domain_names
        ]
    }


def amplify_job_response(job_id="j1", commit_message="Fix bug"):
    now = datetime.datetime(2025, 1, 1, tzinfo=datetime.timezone.utc)
    return {
        "job": {
            "summary": {
                "jobArn": f"arn:aws:amplify:us-east-1:123456789012:apps/app1/branches/main/jobs/{job_id}",
                "jobId": job_id,
                "commitId": "abc123",
                "commitMessage": commit_message,
                "commitTime": now,
                "startTime": now,
                "status": "SUCCEED",
                "jobType": "WEB_HOOK",
            },
            "steps": [],
        }
    }


@pytest.fixture
def stubbed_amplify():
    """Real boto3 Amplify client with botocore's Stubber checking request/response shapes."""
    client = boto3.client(
        "amplify",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    with Stubber(client) as stubber:
        yield client, stubber
