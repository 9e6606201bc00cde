import json
import sys
from pathlib import Path

# EventBridge が Lambda に渡す Amplify Deployment Status Change イベント
def build_event(app_id: str, branch_name: str = "main", job_id: str = "1", job_status: str = "SUCCEED") -> dict:
    return {
        "version": "0",
        "id": "00000000-0000-0000-0000-000000000000",
        "detail-type": "Amplify Deployment Status Change",
        "source": "aws.amplify",
        "account": "123456789012",
        "time": "2025-01-01T00:00:00Z",
        "region": "us-east-1",
        "resources": [
            f"arn:aws:amplify:us-east-1:123456789012:apps/{app_id}/branches/{branch_name}/jobs/{job_id}"
        ],
        "detail": {
            "appId": app_id,
            "branchName": branch_name,
            "jobId": job_id,
            "jobStatus": job_status,
        },
    }


def main() -> None:
    # 引数: [appId] [jobStatus]
    app_id = sys.argv[1] if len(sys.argv) > 1 else "d1234abcd5678"
    job_status = sys.argv[2] if len(sys.argv) > 2 else "SUCCEED"

    event = build_event(app_id, job_status=job_status)

    out_path = Path(__file__).with_name("sample_event.json")
    out_path.write_text(json.dumps(event, indent=2), encoding="utf-8")
    print(f"written: {out_path.resolve()}")
    print("you can now load this JSON as the Lambda event for local testing.")


if __name__ == "__main__":
    main()
