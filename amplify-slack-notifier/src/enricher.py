import functools
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import boto3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnrichedMetadata:
    app_name: Optional[str]
    domain_name: Optional[str] = None
    commit_message: Optional[str] = None


@functools.lru_cache(maxsize=None)
def get_amplify_client(region: str) -> Any:
    """
    リージョンごとに Amplify クライアントを使い回す (warm start 用)
    """
    return boto3.client("amplify", region_name=region)


class Enricher:
    """
    Amplify API から通知用の付加情報を取ってくる。
    取得は全部ベストエフォート。1 つ失敗しても他は続ける。
    """

    def __init__(self, client: Any) -> None:
        self.client = client

    def enrich(
        self,
        app_id: Optional[str],
        branch_name: Optional[str],
        job_id: Optional[str],
    ) -> EnrichedMetadata:
        app_name = app_id
        domain_name = None
        commit_message = None

        if not app_id:
            logger.warning("appId is missing. Skip Amplify lookups.")
            return EnrichedMetadata(app_name=app_name)

        try:
            app_name = self.fetch_app_name(app_id) or app_id
        except Exception as e:
            logger.warning("Failed to get Amplify app: app_id=%s error=%s", app_id, e)

        try:
            domain_name = self.fetch_domain_name(app_id)
        except Exception as e:
            logger.warning("Failed to list domain associations: app_id=%s error=%s", app_id, e)

        if job_id and branch_name:
            try:
                commit_message = self.fetch_commit_message(app_id, branch_name, job_id)
            except Exception as e:
                logger.warning(
                    "Failed to get Amplify job: app_id=%s branch=%s job_id=%s error=%s",
                    app_id,
                    branch_name,
                    job_id,
                    e,
                )
        elif job_id:
            logger.warning("branchName is missing. Skip job lookup: job_id=%s", job_id)

        return EnrichedMetadata(
            app_name=app_name,
            domain_name=domain_name,
            commit_message=commit_message,
        )

    def fetch_app_name(self, app_id: str) -> Optional[str]:
        res = self.client.get_app(appId=app_id)
        logger.debug("get_app response: %s", json.dumps(res, default=str))
        return (res.get("app") or {}).get("name")

    def fetch_domain_name(self, app_id: str) -> Optional[str]:
        res = self.client.list_domain_associations(appId=app_id)
        logger.debug("list_domain_associations response: %s", json.dumps(res, default=str))

        associations = res.get("domainAssociations") or []
        if not associations:
            return None
        # 複数ある場合は先頭を採用
        return associations[0].get("domainName")

    def fetch_commit_message(self, app_id: str, branch_name: str, job_id: str) -> Optional[str]:
        res = self.client.get_job(appId=app_id, branchName=branch_name, jobId=job_id)
        logger.debug("get_job response: %s", json.dumps(res, default=str))

        job = res.get("job") or {}
        summary = job.get("summary") or {}
        return summary.get("commitMessage") or job.get("commitMessage")
