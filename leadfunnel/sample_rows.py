"""Demo event log served until a live sheet fetch succeeds."""

from typing import Any, Dict, List

SAMPLE_ROWS: List[Dict[str, Any]] = [
    {"type": "funnel_tracking", "sessionId": "abc123", "step": "1_started", "Current Rating": "0"},
    {"type": "funnel_tracking", "sessionId": "abc123", "step": "2_rating_selected", "Current Rating": "30"},
    {"type": "funnel_tracking", "sessionId": "abc123", "step": "3_conditions_selected", "Current Rating": "30"},
    {"type": "funnel_tracking", "sessionId": "abc123", "step": "5_all_questions_completed", "Current Rating": "30"},
    {"type": "funnel_tracking", "sessionId": "abc123", "step": "6_viewed_results", "Current Rating": "30", "Projected Rating": "70", "Monthly Increase": "1200"},
    {"type": "funnel_tracking", "sessionId": "abc123", "step": "7_clicked_get_review", "Current Rating": "30"},
    {"type": "funnel_tracking", "sessionId": "abc123", "step": "8_lead_submitted", "Current Rating": "30"},
    {"type": "lead_submission", "sessionId": "abc123", "First Name": "John", "Last Name": "Smith", "Email": "john@test.com", "Phone": "555-1234", "Current Rating": "30", "Projected Rating": "70", "Monthly Increase": "1200"},
    {"type": "funnel_tracking", "sessionId": "def456", "step": "1_started", "Current Rating": "0"},
    {"type": "funnel_tracking", "sessionId": "def456", "step": "2_rating_selected", "Current Rating": "50"},
    {"type": "funnel_tracking", "sessionId": "def456", "step": "3_conditions_selected", "Current Rating": "50"},
    {"type": "funnel_tracking", "sessionId": "def456", "step": "5_all_questions_completed", "Current Rating": "50"},
    {"type": "funnel_tracking", "sessionId": "def456", "step": "6_viewed_results", "Current Rating": "50", "Projected Rating": "80", "Monthly Increase": "800"},
    {"type": "funnel_tracking", "sessionId": "ghi789", "step": "1_started", "Current Rating": "0"},
    {"type": "funnel_tracking", "sessionId": "ghi789", "step": "2_rating_selected", "Current Rating": "70"},
    {"type": "funnel_tracking", "sessionId": "ghi789", "step": "3_conditions_selected", "Current Rating": "70"},
    {"type": "funnel_tracking", "sessionId": "jkl012", "step": "1_started", "Current Rating": "0"},
    {"type": "funnel_tracking", "sessionId": "jkl012", "step": "2_rating_selected", "Current Rating": "10"},
    {"type": "funnel_tracking", "sessionId": "mno345", "step": "1_started", "Current Rating": "0"},
]
