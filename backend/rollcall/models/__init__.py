from rollcall.models.form import Form, FormQuestion, FormSection
from rollcall.models.form_assignment import FormAssignment
from rollcall.models.form_response import FormResponse
from rollcall.models.group import Group, GroupMember
from rollcall.models.user import User

__all__ = [
    "Form",
    "FormAssignment",
    "FormQuestion",
    "FormResponse",
    "FormSection",
    "Group",
    "GroupMember",
    "User",
]
