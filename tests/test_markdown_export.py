"""Unit tests for the markdown formatter and filename generation."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

import pytest

from fathom_mcp_server.schemas import ActionItem, CalendarInvitee, CRMMatches, TranscriptItem
from fathom_mcp_server.utils import (
    format_action_item_digest,
    format_action_items,
    format_crm_matches,
    format_display_date,
    format_duration,
    format_meeting_document,
    format_meeting_list,
    format_participants,
    format_transcript,
    generate_transcript_filename,
    resolve_title,
    sanitize_filename,
)

EXPORTED_AT = datetime(2024, 12, 2, tzinfo=timezone.utc)
SPEAKER_HEADER = re.compile(r"^\*\*.+\*\* _\[.+\]_$", re.MULTILINE)


def _utterance(name, text, ts="00:00:01"):
    return TranscriptItem.model_validate(
        {"speaker": {"display_name": name}, "text": text, "timestamp": ts}
    )


# ── Filenames ───────────────────────────────────────────────────────────────


class TestFilenames:
    def test_sanitize_strips_and_collapses(self):
        assert sanitize_filename('Q4: Review/Plan   "2025"  ') == "Q4_ReviewPlan_2025"
        assert sanitize_filename("a <b> | c? * d\\e") == "a_b_c_de"
        assert sanitize_filename("__lead__ and trail__") == "lead_and_trail"

    def test_sanitize_truncates(self):
        assert len(sanitize_filename("x" * 300)) == 100

    def test_truncation_does_not_leave_trailing_underscore(self, make_meeting):
        stem = sanitize_filename("a" * 99 + " tail")

        assert stem == "a" * 99
        assert generate_transcript_filename(
            make_meeting(title="a" * 99 + " tail")
        ) == "a" * 99 + "_2024-12-01.md"

    def test_filename_uses_title_and_utc_date(self, make_meeting):
        meeting = make_meeting(title="Q4: Review / Plan   Kickoff")

        assert generate_transcript_filename(meeting) == "Q4_Review_Plan_Kickoff_2024-12-01.md"

    def test_date_is_taken_in_utc(self, make_meeting):
        meeting = make_meeting(
            recording_start_time="2024-12-01T23:30:00-05:00",
            recording_end_time="2024-12-02T00:30:00-05:00",
        )

        assert generate_transcript_filename(meeting).endswith("_2024-12-02.md")

    def test_title_fallback_chain(self, make_meeting):
        assert generate_transcript_filename(
            make_meeting(title=None, meeting_title="Weekly Sync")
        ) == "Weekly_Sync_2024-12-01.md"
        assert generate_transcript_filename(
            make_meeting(title="", meeting_title=None, recording_id=42)
        ) == "Meeting_42_2024-12-01.md"

    def test_unsanitizable_title_falls_back_to_id(self, make_meeting):
        meeting = make_meeting(title="???", recording_id=42)

        assert generate_transcript_filename(meeting) == "Meeting_42_2024-12-01.md"

    def test_filename_is_deterministic_and_date_sensitive(self, make_meeting):
        first = make_meeting()
        later = make_meeting(
            recording_start_time="2024-12-08T15:00:00Z",
            recording_end_time="2024-12-08T15:30:00Z",
        )

        assert generate_transcript_filename(first) == generate_transcript_filename(first)
        assert generate_transcript_filename(first) != generate_transcript_filename(later)

    def test_resolve_title(self, make_meeting):
        assert resolve_title(make_meeting()) == "Q4 Review"
        assert resolve_title(make_meeting(title=None)) == "Quarterly Business Review"
        assert resolve_title(make_meeting(title=None, meeting_title=None, recording_id=5)) == "Meeting 5"


# ── Durations & dates ───────────────────────────────────────────────────────


class TestDuration:
    T0 = datetime(2024, 12, 1, 15, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (0, "0s"),
            (-30, "0s"),
            (45, "45s"),
            (90, "1m 30s"),
            (3600, "1h 0m"),
            (3661, "1h 1m"),
            (2732, "45m 32s"),
        ],
    )
    def test_format_duration(self, seconds, expected):
        assert format_duration(self.T0, self.T0 + timedelta(seconds=seconds)) == expected

    def test_accepts_iso_strings(self):
        assert format_duration("2024-12-01T15:00:00Z", "2024-12-01T15:01:30Z") == "1m 30s"

    def test_display_date_is_utc(self):
        assert format_display_date("2024-12-01T10:00:00-05:00") == "Sunday, December 1, 2024 at 03:00 PM UTC"


# ── Sections ────────────────────────────────────────────────────────────────


class TestTranscript:
    def test_consecutive_lines_share_one_header(self):
        text = format_transcript(
            [
                _utterance("Ann", "one", "00:00:01"),
                _utterance("Ann", "two", "00:00:04"),
                _utterance("Bo", "three", "00:00:09"),
                _utterance("Ann", "four", "00:00:12"),
            ]
        )

        assert SPEAKER_HEADER.findall(text) == [
            "**Ann** _[00:00:01]_",
            "**Bo** _[00:00:09]_",
            "**Ann** _[00:00:12]_",
        ]
        assert [line for line in text.splitlines() if line.startswith("> ")] == [
            "> one",
            "> two",
            "> three",
            "> four",
        ]

    def test_missing_speaker_name(self):
        item = TranscriptItem.model_validate({"speaker": {}, "text": "hello", "timestamp": "00:01:00"})

        assert "**Unknown Speaker** _[00:01:00]_" in format_transcript([item])

    def test_empty_transcript_placeholder(self):
        assert format_transcript([]) == "_No transcript available_"
        assert format_transcript(None) == "_No transcript available_"


class TestListSections:
    def test_participants(self):
        invitees = [
            CalendarInvitee(name="Ann", email="ann@acme.com", is_external=False),
            CalendarInvitee(name="Cy", email="cy@globex.com", is_external=True),
        ]

        assert format_participants(invitees) == (
            "- **Ann** <ann@acme.com>\n- **Cy** <cy@globex.com> _(external)_"
        )
        assert format_participants([]) == "_No participants listed_"

    def test_action_items(self):
        items = [
            ActionItem.model_validate(
                {
                    "description": "Ship it",
                    "completed": True,
                    "recording_timestamp": "00:12:01",
                    "assignee": {"name": "Bob", "email": "bob@acme.com"},
                }
            ),
            ActionItem(description="Follow up"),
        ]

        assert format_action_items(items) == (
            "- [x] Ship it _(assigned to Bob)_ at 00:12:01\n- [ ] Follow up"
        )
        assert format_action_items(None) == "_No action items_"
        assert format_action_items([]) == "_No action items_"

    def test_crm_matches(self):
        crm = CRMMatches.model_validate(
            {
                "contacts": [{"name": "Cy", "email": "cy@globex.com", "record_url": "https://crm/c/1"}],
                "companies": [{"name": "Globex", "record_url": "https://crm/co/1"}],
                "deals": [
                    {"name": "Renewal", "amount": 12500, "record_url": "https://crm/d/1"},
                    {"name": "Add-on", "amount": 99.5, "record_url": "https://crm/d/2"},
                ],
            }
        )

        assert format_crm_matches(crm) == "\n".join(
            [
                "**Contacts:**",
                "- [Cy](https://crm/c/1) <cy@globex.com>",
                "**Companies:**",
                "- [Globex](https://crm/co/1)",
                "**Deals:**",
                "- [Renewal](https://crm/d/1) - $12,500",
                "- [Add-on](https://crm/d/2) - $99.50",
            ]
        )
        assert format_crm_matches(None) == "_No CRM data_"
        assert format_crm_matches(CRMMatches(contacts=[])) == "_No CRM data_"


# ── Documents ───────────────────────────────────────────────────────────────


class TestMeetingDocument:
    def test_end_to_end_scenario(self, make_meeting):
        doc = format_meeting_document(make_meeting(), exported_at=EXPORTED_AT)

        assert doc.startswith("# Q4 Review\n")
        assert "| **Duration** | 45m 32s |" in doc
        assert "| **Recording ID** | 123456 |" in doc
        assert "| **Recorded by** | Alice Smith <alice@acme.com> |" in doc
        assert doc.count("_(external)_") == 1
        action_section = doc.split("## Action Items")[1].split("## Transcript")[0]
        assert action_section.count("- [ ] ") == 1
        transcript_section = doc.split("## Transcript")[1]
        assert len(SPEAKER_HEADER.findall(transcript_section)) == 1
        assert doc.endswith("---\n_Exported from Fathom.video on 2024-12-02T00:00:00.000Z_")

    def test_absent_sections_leave_no_heading(self, make_meeting):
        doc = format_meeting_document(
            make_meeting(action_items=[], transcript=None), exported_at=EXPORTED_AT
        )

        assert "## Summary" not in doc
        assert "## Action Items" not in doc
        assert "## CRM Matches" not in doc
        assert "## Transcript\n\n_No transcript available_" in doc

    def test_section_order(self, make_meeting):
        meeting = make_meeting(
            default_summary={"template_name": "General", "markdown_formatted": "## Key points\n- Revenue up"},
            crm_matches={"companies": [{"name": "Globex", "record_url": "https://crm/co/1"}]},
        )
        doc = format_meeting_document(meeting, exported_at=EXPORTED_AT)

        headings = [
            "## Meeting Details",
            "## Participants",
            "## Summary",
            "## Action Items",
            "## CRM Matches",
            "## Transcript",
            "\n---\n",
        ]
        positions = [doc.index(h) for h in headings]
        assert positions == sorted(positions)
        assert "- Revenue up" in doc

    def test_document_is_pure_given_export_time(self, make_meeting):
        meeting = make_meeting()

        assert format_meeting_document(meeting, exported_at=EXPORTED_AT) == format_meeting_document(
            meeting, exported_at=EXPORTED_AT
        )


class TestMeetingList:
    def test_table_rows_in_input_order(self, make_meeting):
        table = format_meeting_list(
            [make_meeting(recording_id=2, title="Second"), make_meeting(recording_id=1, title="First")]
        )
        lines = table.splitlines()

        assert lines[0] == "| Title | Date | Duration | Recorded By | Participants | ID |"
        assert lines[2].startswith("| Second | Sunday, December 1, 2024 at 03:00 PM UTC | 45m 32s | Alice Smith | 2 | 2 |")
        assert lines[3].startswith("| First |")
        assert len(lines) == 4

    def test_empty_list(self):
        assert format_meeting_list([]) == "No meetings found."

    def test_action_item_digest_skips_meetings_without_items(self, make_meeting):
        with_items = make_meeting()
        without = make_meeting(recording_id=2, title="Quiet")

        digest = format_action_item_digest(
            [(with_items, with_items.action_items), (without, [])]
        )

        assert digest.startswith("# Action Items from Recent Meetings\n\n### Q4 Review\n")
        assert "Quiet" not in digest
        assert format_action_item_digest([(without, [])]) == "No action items found in recent meetings."
