from __future__ import annotations

import argparse
from datetime import datetime, timezone

from services.api.app.db.database import db_session
from services.api.app.db.init_db import init_db
from services.api.app.db.models import Meeting


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed a demo meeting for Jarvis automations")
    parser.add_argument("--meeting-id", default="demo-meeting")
    parser.add_argument("--conversation-id", default="demo-conversation")
    parser.add_argument("--title", default="Discovery call")
    parser.add_argument("--contact-id", default="John123")
    parser.add_argument(
        "--summary",
        default="Layla asked about pricing for the enterprise tier and is interested in a demo.",
    )
    parser.add_argument(
        "--insight",
        action="append",
        dest="insights",
        default=None,
        help="Insight text; repeat for several insights.",
    )
    args = parser.parse_args()

    insights = args.insights or ["Follow up with enterprise pricing sheet."]

    init_db()

    db = db_session()
    try:
        meeting = db.get(Meeting, args.meeting_id)
        if meeting is None:
            meeting = Meeting(id=args.meeting_id)
            db.add(meeting)

        meeting.symbl_conversation_id = args.conversation_id
        meeting.title = args.title
        meeting.status = "completed"
        meeting.contact_id = args.contact_id
        meeting.summary = args.summary
        meeting.insights_json = insights
        meeting.raw_data_json = {"seeded": True}
        meeting.date = datetime.now(timezone.utc)

        db.commit()
        print(f"Seeded meeting={args.meeting_id} contact={args.contact_id}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
