# =============================================================================
# daycare_core/reports/email_template.py
# Plain-text and HTML rendering of the daily report
# =============================================================================
"""
Pure rendering functions; no I/O and no store access.

The narrative ("Special Moments") is the AI summary when present, else the
teacher notes, else a friendly default line.
"""

from __future__ import annotations
from html import escape
from typing import Iterable, List, Optional

from daycare_core.offline.models import Child, DailyLog, Holiday, Settings
from daycare_core.reports.trends import WeeklyTrends
from daycare_core.utils.dates import format_12h


DEFAULT_NARRATIVE = "A wonderful day of learning and play!"
RULE = "\n------------------------------------------\n"

AMBER_400 = "#FBBF24"
AMBER_900 = "#78350F"
SLATE_500 = "#64748b"
SLATE_800 = "#1e293b"


def compose_subject(child: Child, log: DailyLog) -> str:
    return f"Daily Report – {child.first_name} – {log.date}"


def narrative(log: DailyLog, summary: Optional[str] = None) -> str:
    return (summary or "").strip() or log.teacher_notes.strip() or DEFAULT_NARRATIVE


def render_text(
    log: DailyLog,
    child: Child,
    settings: Settings,
    summary: Optional[str] = None,
    holidays: Iterable[Holiday] = (),
    trends: Optional[WeeklyTrends] = None,
) -> str:
    sections: List[str] = [
        f"DAILY REPORT: {child.first_name} {child.last_name}".rstrip(),
        f"Date: {log.date}",
        f"Arrived: {format_12h(log.arrival_time)} | Departed: {format_12h(log.departure_time)}",
        f"Overall Mood: {log.overall_mood}",
        RULE,
        "SPECIAL MOMENTS:",
        narrative(log, summary),
        RULE,
    ]

    if log.activities:
        sections.append("ACTIVITIES & LEARNING:")
        for a in log.activities:
            sections.append(f"- [{a.get('time', '')}] {a.get('category', '')}: {a.get('description', '')}")
        sections.append("")

    if log.meals or log.bottles:
        sections.append("NUTRITION:")
        for m in log.meals:
            sections.append(
                f"- [{m.get('time', '')}] {m.get('type', '')}: {m.get('items', '')} ({m.get('amount', '')} eaten)"
            )
        for b in log.bottles:
            sections.append(f"- [{b.get('time', '')}] Bottle: {b.get('type', '')} ({b.get('amount', '')})")
        sections.append("")

    if log.naps:
        sections.append("REST:")
        for n in log.naps:
            end = n.get("end_time")
            span = f"{n.get('start_time', '')}-{end}" if end else n.get("start_time", "")
            sections.append(f"- [{span}] Nap ({n.get('quality', '')} quality)")
        sections.append("")

    if log.diapers:
        sections.append("POTTY:")
        sections.append(", ".join(f"{d.get('time', '')} - {d.get('type', '')}" for d in log.diapers))
        sections.append("")

    if log.medications:
        sections.append("MEDICATIONS GIVEN:")
        for med in log.medications:
            sections.append(f"- [{med.get('time', '')}] {med.get('name', '')} {med.get('dosage', '')}".rstrip())
        sections.append("")

    if log.incidents:
        sections.append("INCIDENTS:")
        for i in log.incidents:
            line = f"- [{i.get('time', '')}] {i.get('type', '')}: {i.get('description', '')}"
            if i.get("action_taken"):
                line += f" (Action: {i['action_taken']})"
            sections.append(line)
        sections.append("")

    if log.supplies_needed:
        sections.append("SUPPLIES NEEDED:")
        sections.append(f"* {log.supplies_needed}")
        sections.append("")

    if trends is not None and trends.has_data:
        sections.append("THIS WEEK:")
        sections.extend(trends.summary_lines())
        sections.append("")

    holidays = list(holidays)
    if holidays:
        sections.append("UPCOMING CLOSURES & EVENTS:")
        for h in holidays:
            sections.append(f"- {h.date}: {h.name} ({h.type})")
        sections.append("")

    sections.append(f"\n{settings.email_signature}")
    return "\n".join(sections)


# =============================================================================
# HTML
# =============================================================================

_H3 = (
    f"color: {SLATE_500}; font-size: 12px; font-weight: 800; text-transform: uppercase; "
    "letter-spacing: 1px; border-bottom: 1px solid #fef3c7; padding-bottom: 8px; margin-bottom: 12px;"
)


def _section(title: str, rows: List[tuple]) -> str:
    """rows: (time, heading, detail) triples, already plain text."""
    if not rows:
        return ""
    body = "".join(
        f"""
            <tr>
              <td style="padding: 4px 0; font-size: 14px; vertical-align: top; width: 60px; color: {AMBER_400}; font-weight: bold;">{escape(time)}</td>
              <td style="padding: 4px 0; font-size: 14px; color: {SLATE_800};">
                <strong>{escape(heading)}</strong>
                <div style="color: {SLATE_500}; font-size: 12px; font-style: italic;">{escape(detail)}</div>
              </td>
            </tr>"""
        for time, heading, detail in rows
    )
    return f"""
      <div style="margin-bottom: 24px;">
        <h3 style="{_H3}">{escape(title)}</h3>
        <table width="100%" cellpadding="0" cellspacing="0">{body}
        </table>
      </div>"""


def _stat(label: str, value: str) -> str:
    return f"""
              <td align="center" style="background-color: #f8fafc; padding: 12px; border-radius: 16px; width: 33%;">
                <div style="font-size: 10px; font-weight: bold; color: {SLATE_500}; text-transform: uppercase;">{escape(label)}</div>
                <div style="font-size: 16px; font-weight: bold; color: {SLATE_800};">{escape(value)}</div>
              </td>"""


def render_html(
    log: DailyLog,
    child: Child,
    settings: Settings,
    summary: Optional[str] = None,
    holidays: Iterable[Holiday] = (),
    trends: Optional[WeeklyTrends] = None,
) -> str:
    activities = [
        (a.get("time", ""), a.get("category", ""), a.get("description", ""))
        for a in log.activities
    ]
    nutrition = [
        (m.get("time", ""), m.get("type", ""), f"{m.get('items', '')} ({m.get('amount', '')})")
        for m in log.meals
    ] + [
        (b.get("time", ""), f"Bottle: {b.get('type', '')}", b.get("amount", ""))
        for b in log.bottles
    ]
    rest = [
        (n.get("start_time", ""), "Nap", f"{n.get('quality', '')} until {n.get('end_time') or '--:--'}")
        for n in log.naps
    ]
    medications = [
        (m.get("time", ""), m.get("name", ""), m.get("dosage", ""))
        for m in log.medications
    ]
    incidents = [
        (i.get("time", ""), i.get("type", ""), f"{i.get('description', '')} {i.get('action_taken', '')}".strip())
        for i in log.incidents
    ]

    potty = ""
    if log.diapers:
        chips = " ".join(
            f'<span style="display: inline-block; padding: 4px 8px; background-color: #f8fafc; '
            f'border-radius: 6px; margin: 2px; border: 1px solid #f1f5f9;">'
            f"{escape(d.get('time', ''))} - {escape(d.get('type', ''))}</span>"
            for d in log.diapers
        )
        potty = f"""
      <div style="margin-bottom: 24px;">
        <h3 style="{_H3}">Potty</h3>
        <div style="color: {SLATE_800}; font-size: 14px; font-weight: bold;">{chips}</div>
      </div>"""

    supplies = ""
    if log.supplies_needed:
        supplies = f"""
      <div style="background-color: #fef2f2; border: 1px solid #fee2e2; padding: 16px; border-radius: 16px; margin-bottom: 32px;">
        <span style="color: #ef4444; font-size: 10px; font-weight: bold; text-transform: uppercase; display: block; margin-bottom: 4px;">Needs</span>
        <p style="margin: 0; color: #b91c1c; font-weight: bold; font-size: 14px;">{escape(log.supplies_needed)}</p>
      </div>"""

    week = ""
    if trends is not None and trends.has_data:
        week = _section("This Week", [("", line, "") for line in trends.summary_lines()])

    holidays = list(holidays)
    upcoming = _section(
        "Upcoming Closures & Events",
        [(h.date, h.name, h.type) for h in holidays],
    )

    signature = "<br>".join(escape(line) for line in settings.email_signature.split("\n"))

    return f"""
    <div style="font-family: 'Inter', Helvetica, Arial, sans-serif; background-color: #fffbeb; padding: 20px;">
      <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 24px; overflow: hidden; border: 1px solid #fde68a;">
        <div style="background-color: {AMBER_400}; padding: 40px 20px; text-align: center;">
          <h1 style="margin: 0; color: {AMBER_900}; font-size: 24px; font-weight: 900; text-transform: uppercase; letter-spacing: 2px;">{escape(settings.daycare_name)}</h1>
          <p style="margin: 8px 0 0 0; color: {AMBER_900}; font-weight: bold;">Daily Report for {escape(child.first_name)}</p>
          <div style="display: inline-block; margin-top: 12px; padding: 4px 16px; border-radius: 20px; font-size: 12px; font-weight: bold; color: {AMBER_900};">{escape(log.date)}</div>
        </div>
        <div style="padding: 32px;">
          <table width="100%" cellpadding="0" cellspacing="0" style="margin-bottom: 32px;">
            <tr>{_stat("Arrived", format_12h(log.arrival_time))}
              <td width="10"></td>{_stat("Mood", log.overall_mood)}
              <td width="10"></td>{_stat("Departed", format_12h(log.departure_time))}
            </tr>
          </table>
          <div style="background-color: #fffdf2; border: 1px solid #fef3c7; padding: 24px; border-radius: 24px; margin-bottom: 32px;">
            <h3 style="margin: 0 0 12px 0; color: {SLATE_800}; font-size: 16px; font-weight: bold;">Special Moments</h3>
            <p style="margin: 0; color: {SLATE_500}; line-height: 1.6; font-style: italic;">"{escape(narrative(log, summary))}"</p>
          </div>
          {_section("Activities & Learning", activities)}
          {_section("Nutrition", nutrition)}
          {_section("Rest", rest)}
          {potty}
          {_section("Medications", medications)}
          {_section("Incidents", incidents)}
          {supplies}
          {week}
          {upcoming}
          <div style="text-align: center; border-top: 1px solid #fef3c7; padding-top: 32px; margin-top: 32px;">
            <p style="margin: 0; color: {SLATE_500}; font-size: 14px;">{signature}</p>
            <p style="margin: 8px 0 0 0; color: {SLATE_500}; font-size: 11px; font-style: italic;">Reply to this email if you have any questions.</p>
          </div>
        </div>
      </div>
    </div>
"""
