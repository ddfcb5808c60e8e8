"""Starter templates offered when creating a form."""

import copy
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status

FORM_TEMPLATES: List[Dict[str, Any]] = [
    {
        "id": "blank",
        "name": "Blank Form",
        "description": "Start from scratch",
        "fields": [],
    },
    {
        "id": "contact",
        "name": "Contact Form",
        "description": "Basic contact information",
        "fields": [
            {"id": "name", "type": "text", "label": "Full Name",
             "placeholder": "John Doe", "required": True},
            {"id": "email", "type": "email", "label": "Email Address",
             "placeholder": "john@example.com", "required": True},
            {"id": "message", "type": "textarea", "label": "Message",
             "placeholder": "Your message here...", "required": True},
        ],
    },
    {
        "id": "feedback",
        "name": "Feedback Form",
        "description": "Customer feedback",
        "fields": [
            {"id": "name", "type": "text", "label": "Full Name",
             "placeholder": "John Doe", "required": True},
            {"id": "email", "type": "email", "label": "Email Address",
             "placeholder": "john@example.com", "required": True},
            {"id": "rating", "type": "radio", "label": "How would you rate your experience?",
             "required": True, "options": ["Excellent", "Good", "Average", "Poor", "Very Poor"]},
            {"id": "feedback", "type": "textarea", "label": "Additional Comments",
             "placeholder": "Please share any additional feedback here...", "required": False},
        ],
    },
    {
        "id": "registration",
        "name": "Event Registration",
        "description": "Event signup form",
        "fields": [
            {"id": "name", "type": "text", "label": "Full Name",
             "placeholder": "John Doe", "required": True},
            {"id": "email", "type": "email", "label": "Email Address",
             "placeholder": "john@example.com", "required": True},
            {"id": "phone", "type": "phone", "label": "Phone Number",
             "placeholder": "+1 (555) 000-0000", "required": False},
            {"id": "ticketType", "type": "dropdown", "label": "Ticket Type",
             "placeholder": "Select ticket type", "required": True,
             "options": ["General Admission", "VIP", "Early Bird", "Student"]},
            {"id": "dietaryRestrictions", "type": "checkbox",
             "label": "Do you have any dietary restrictions?", "required": False},
        ],
    },
]


class TemplateService:
    """Lookup for the built-in starter templates."""

    @staticmethod
    def get_templates() -> List[Dict[str, Any]]:
        return copy.deepcopy(FORM_TEMPLATES)

    @staticmethod
    def get_template(template_id: str) -> Optional[Dict[str, Any]]:
        for template in FORM_TEMPLATES:
            if template["id"] == template_id:
                return copy.deepcopy(template)
        return None

    @staticmethod
    def get_template_fields(template_id: str) -> List[Dict[str, Any]]:
        template = TemplateService.get_template(template_id)
        if template is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Template not found"
            )
        return template["fields"]
