import json
import logging
from typing import Any, Dict, Optional

from enricher import EnrichedMetadata, Enricher, get_amplify_client
from settings import ConfigurationError, NotifierConfig, load_config, resolve_webhook_url
from slack_client import SlackDeliveryError, send_slack
from slack_message import BuildEvent, build_message

LOGGER_PREFIX = "[AmplifyNotifier]"

MISSING_WEBHOOK_BODY = "SLACK_WEBHOOK_URL is not configured."
SUCCESS_BODY = "Notification sent successfully."
FAILURE_BODY = "Failed to send notification."

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def _result(status_code: int, body: str) -> Dict[str, Any]:
    return {"statusCode": status_code, "body": body}


# 1. handler
def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    エントリーポイント (EventBridge: Amplify Deployment Status Change)
    """
    config = load_config()
    logger.setLevel(logging.DEBUG if config.debug else logging.INFO)

    return run_pipeline(event, config)


def run_pipeline(
    event: Dict[str, Any],
    config: NotifierConfig,
    enricher: Optional[Enricher] = None,
) -> Dict[str, Any]:
    """
    設定チェック → 付加情報取得 → Slack 送信。
    例外は外に出さず、必ず statusCode/body を返す。
    """
    logger.debug("%s Received event: %s", LOGGER_PREFIX, json.dumps(event, default=str)[:500])

    try:
        webhook_url = resolve_webhook_url(config)
    except ConfigurationError as e:
        logger.error("%s Webhook URL could not be resolved: %s", LOGGER_PREFIX, e)
        return _result(500, MISSING_WEBHOOK_BODY)

    if not webhook_url:
        # ネットワークに出る前にここで止める
        logger.error("%s Error: SLACK_WEBHOOK_URL environment variable is not set.", LOGGER_PREFIX)
        return _result(500, MISSING_WEBHOOK_BODY)

    build_event = BuildEvent.from_event(event)
    logger.debug("%s Extracted details: %s", LOGGER_PREFIX, build_event)

    metadata = EnrichedMetadata(app_name=build_event.app_id)

    if config.enrichment_enabled and enricher is None:
        try:
            enricher = Enricher(get_amplify_client(build_event.region))
        except Exception as e:
            # region が不正などでクライアントが作れなくても通知は送る
            logger.warning(
                "%s Failed to create Amplify client: region=%s error=%s",
                LOGGER_PREFIX,
                build_event.region,
                e,
            )

    if config.enrichment_enabled and enricher is not None:
        metadata = enricher.enrich(build_event.app_id, build_event.branch_name, build_event.job_id)

    try:
        return notify(build_event, metadata, config, webhook_url)
    except Exception:
        logger.exception("%s Unexpected error when calling Slack", LOGGER_PREFIX)
        return _result(500, FAILURE_BODY)


# 2. 送信
def notify(
    event: BuildEvent,
    metadata: EnrichedMetadata,
    config: NotifierConfig,
    webhook_url: Optional[str] = None,
) -> Dict[str, Any]:
    webhook_url = webhook_url or config.webhook_url
    if not webhook_url:
        logger.error("%s Error: SLACK_WEBHOOK_URL environment variable is not set.", LOGGER_PREFIX)
        return _result(500, MISSING_WEBHOOK_BODY)

    message = build_message(
        event,
        app_name=metadata.app_name,
        domain_name=metadata.domain_name,
        commit_message=metadata.commit_message,
        environment=config.environment,
        thread_hint=config.thread_hint_enabled,
    )
    logger.debug("%s Message to send: %s", LOGGER_PREFIX, json.dumps(message.as_payload())[:500])

    try:
        send_slack(webhook_url, message.as_payload())
    except SlackDeliveryError as e:
        logger.error(
            "%s Failed to send message to Slack: status=%s error=%s",
            LOGGER_PREFIX,
            e.status,
            e,
        )
        return _result(500, FAILURE_BODY)

    logger.info(
        "%s Slack notification sent: app=%s branch=%s status=%s",
        LOGGER_PREFIX,
        metadata.app_name,
        event.branch_name,
        event.job_status,
    )
    return _result(200, SUCCESS_BODY)
