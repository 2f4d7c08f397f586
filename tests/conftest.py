import pytest
from aws_cdk import Environment

ENV = Environment(account="123456789012", region="eu-west-1")

SITE_PREFIX = "cdk-web-static"
CICD_PREFIX = "cdk-web-cicd"
BUCKET_EXPORT = "cdk-web-static-bucket-name"
DISTRIBUTION_EXPORT = "cdk-web-static-distribution-id"


@pytest.fixture
def site_dir(tmp_path):
    content = tmp_path / "dist"
    content.mkdir()
    (content / "index.html").write_text("<h1>hello</h1>", encoding="utf-8")
    return content


@pytest.fixture
def context(site_dir):
    return {
        "static-web": {
            "account_id": "123456789012",
            "region": "eu-west-1",
            "site": {
                "hosted_zone_name": "example.com",
                "domain_name": "example.com",
                "include_www": False,
                "source_path": str(site_dir),
            },
            "cicd": {
                "github": {"owner": "octo", "repo": "site", "branch": "master"},
                "token_secret_id": "/static-cdk/cicd/github_token",
                "alert_email": "ops@example.com",
            },
        }
    }
