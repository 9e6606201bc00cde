import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class SlackDeliveryError(Exception):
    """Slack への送信失敗。ネットワークエラーのときは status は None"""

    def __init__(self, message: str, status: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


def mask_webhook(url: str) -> str:
    """
    URL 全体はログに出さない。末尾だけ残す
    """
    return url[-12:] if len(url) > 12 else url


def send_slack(webhook_url: str, payload: Dict[str, Any]) -> str:
    """
    webhook_url に payload を JSON で POST し、レスポンス body を返す。
    2xx 以外や通信エラーは SlackDeliveryError にして投げる。
    """
    data = json.dumps(payload).encode("utf-8")
    masked_tail = mask_webhook(webhook_url)

    req = urllib.request.Request(
        webhook_url,
        data=data,
        method="POST",
        headers={"Content-Type": "application/json"},
    )

    try:
        with urllib.request.urlopen(req) as res:
            status = res.getcode()
            body = res.read().decode("utf-8", errors="ignore")
    except urllib.error.HTTPError as e:
        error_body = e.read().decode("utf-8", errors="ignore")
        logger.error(
            "Slack HTTPError: status=%s body=%s url_tail=%s",
            e.code,
            error_body,
            masked_tail,
        )
        raise SlackDeliveryError(
            f"Slack API error: {e.code} {error_body}", status=e.code, body=error_body
        ) from e
    except urllib.error.URLError as e:
        logger.error(
            "Slack URLError: reason=%s url_tail=%s",
            getattr(e, "reason", None),
            masked_tail,
        )
        raise SlackDeliveryError(f"Slack unreachable: {e.reason}") from e
    except (http.client.HTTPException, OSError) as e:
        logger.error("Slack connection error: error=%s url_tail=%s", e, masked_tail)
        raise SlackDeliveryError(f"Slack connection error: {e}") from e

    if not (200 <= status < 300):
        logger.error("Slack returned non-2xx: status=%s body=%s url_tail=%s", status, body, masked_tail)
        raise SlackDeliveryError(f"Slack API error: {status} {body}", status=status, body=body)

    logger.info(
        "Slack response success: status=%s body=%s url_tail=%s",
        status,
        body,
        masked_tail,
    )
    return body
