"""MCP Prompts — pre-built interaction templates for health record journeys."""

from __future__ import annotations

from fastmcp import FastMCP


def register_health_prompts(mcp: FastMCP) -> None:
    """Register health domain MCP prompts."""

    @mcp.prompt()
    def health_summary_prompt() -> str:
        """Prompt template for reviewing the overall health record."""
        return """I'd like an overview of my health record. Please:

1. Show my dashboard (active medications, upcoming appointments, abnormal lab values)
2. Generate a fresh health summary
3. Explain any lab values outside the normal range in plain language
4. Tell me what to prepare for my next appointments

Please be honest but encouraging, and remind me where I should talk to my doctor."""

    @mcp.prompt()
    def lab_report_entry_prompt(report_name: str = "Blood test") -> str:
        """Prompt template for entering a new lab report."""
        return f"""I want to add a lab report called "{report_name}". Please:

1. Help me find each test in the lab catalogue so the units and ranges are right
2. Make sure no value is left empty or at 0 before saving
3. Save the report and tell me which values are outside the normal range"""

    @mcp.prompt()
    def symptom_check_prompt(symptoms: str = "", severity: str = "mild") -> str:
        """Prompt template for a symptom check-in."""
        described = f' My symptoms: "{symptoms}".' if symptoms else ""
        return f"""I'm not feeling well and would like guidance (severity: {severity}).{described}

Please ask how long this has been going on if I haven't said, then run a symptom check.
Tell me what to track, what to ask my doctor, and what level of care is appropriate.
I understand this is not a diagnosis."""

    @mcp.prompt()
    def appointment_prep_prompt() -> str:
        """Prompt template for preparing for upcoming doctor visits."""
        return """Help me prepare for my upcoming doctor appointments:

1. List my upcoming appointments, soonest first
2. For each one, suggest what to bring and which recent lab values are relevant
3. Suggest questions to ask, based on my medications and lab trends"""
