from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

DEFAULT_REGION = "us-east-1"

NEUTRAL_ICON = "ℹ️"

# jobStatus → (絵文字, 文言)
STATUS_DISPLAY = {
    "SUCCEED": ("✅", "succeeded 🎉"),
    "SUCCEEDED": ("✅", "succeeded 🎉"),
    "FAILED": ("❌", "failed 😢"),
    "STARTED": ("🚀", "started"),
}


class StatusDisplay(NamedTuple):
    icon: str
    phrase: str


@dataclass(frozen=True)
class BuildEvent:
    region: str = DEFAULT_REGION
    app_id: Optional[str] = None
    branch_name: Optional[str] = None
    job_id: Optional[str] = None
    job_status: Optional[str] = None

    @classmethod
    def from_event(cls, event: Dict[str, Any]) -> "BuildEvent":
        """
        EventBridge の Amplify Deployment Status Change イベントを想定。
        detail が無くてもエラーにはせず、全部 None 扱い。
        """
        detail = event.get("detail") or {}

        return cls(
            region=event.get("region") or DEFAULT_REGION,
            app_id=detail.get("appId"),
            branch_name=detail.get("branchName"),
            job_id=detail.get("jobId"),
            job_status=detail.get("jobStatus"),
        )


@dataclass(frozen=True)
class NotificationMessage:
    text: str
    blocks: Tuple[Dict[str, Any], ...]
    thread_ts: Optional[str] = None

    def as_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "text": self.text,
            "blocks": list(self.blocks),
        }
        if self.thread_ts:
            payload["thread_ts"] = self.thread_ts
        return payload


def classify_status(status: Optional[str]) -> StatusDisplay:
    if status in STATUS_DISPLAY:
        return StatusDisplay(*STATUS_DISPLAY[status])
    return StatusDisplay(NEUTRAL_ICON, status or "unknown")


def build_console_url(region: str, app_id: Optional[str], branch_name: Optional[str]) -> str:
    """
    Amplify コンソールで対象ブランチのデプロイ一覧を開く URL を作成
    """
    return (
        f"https://{region}.console.aws.amazon.com/amplify"
        f"/apps/{app_id or 'unknown'}/branches/{branch_name or 'unknown'}/deployments"
    )


def build_thread_id(app_name: Optional[str], job_id: Optional[str]) -> Optional[str]:
    # スレッドにまとめるためのヒント。Slack 側が解釈しなければ無視される
    if not job_id:
        return None
    return f"{app_name or 'unknown'}-{job_id}"


def _mrkdwn(text: str) -> Dict[str, str]:
    return {"type": "mrkdwn", "text": text}


def build_message(
    event: BuildEvent,
    app_name: Optional[str],
    domain_name: Optional[str] = None,
    commit_message: Optional[str] = None,
    environment: Optional[str] = None,
    thread_hint: bool = True,
) -> NotificationMessage:
    """
    Block Kit 形式のメッセージを組み立てる。
    値が無い項目は unknown にするか、行ごと省く。
    """
    display = classify_status(event.job_status)
    branch = event.branch_name or "unknown"

    header = f"{display.icon} Amplify Build {display.phrase}"
    if environment:
        header += f" ({environment})"

    fields: List[Dict[str, str]] = [
        _mrkdwn(f"*App Name:* `{app_name or 'unknown'}`"),
        _mrkdwn(f"*Branch:* `{branch}`"),
    ]
    if domain_name:
        fields.append(_mrkdwn(f"*Domain:* https://{domain_name}"))

    blocks: List[Dict[str, Any]] = [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": header, "emoji": True},
        },
        {"type": "section", "fields": fields},
    ]

    if commit_message:
        blocks.append({"type": "context", "elements": [_mrkdwn(f"*Commit:* `{commit_message}`")]})

    blocks.append(
        {
            "type": "actions",
            "elements": [
                {
                    "type": "button",
                    "text": {"type": "plain_text", "text": "View Build Details", "emoji": True},
                    "style": "primary",
                    "url": build_console_url(event.region, event.app_id, event.branch_name),
                    "action_id": "view_build_button",
                }
            ],
        }
    )
    blocks.append({"type": "context", "elements": [_mrkdwn(f"Occurred in region: {event.region}")]})

    return NotificationMessage(
        text=f"Amplify Build for {event.branch_name or 'unknown branch'} {display.phrase}",
        blocks=tuple(blocks),
        thread_ts=build_thread_id(app_name, event.job_id) if thread_hint else None,
    )
