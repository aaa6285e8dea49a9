"""
Notification templates and rendering

Templates use positional ``%s`` placeholders (``%%`` for a literal percent)
and are filled from an ordered argument list. Rendering never raises: when
the arguments do not fit, the raw template text is returned.
"""

from typing import Any, NamedTuple, Optional, Sequence

from .entities.enums import NotificationType

MAX_TEMPLATE_ARGS = 5
DEFAULT_TEMPLATE_NAME = "default"
FALLBACK_SUBJECT = "Notification"
FALLBACK_MESSAGE = "You have a new notification"


class TemplateSeed(NamedTuple):
    type: NotificationType
    name: str
    subject: str
    message: str
    description: str


DEFAULT_TEMPLATES = (
    TemplateSeed(
        NotificationType.system, "default", "System Notification", "%s",
        "Generic system message",
    ),
    TemplateSeed(
        NotificationType.organization_added, "default", "Added to Organization",
        "%s added you to %s", "args: inviter, organization",
    ),
    TemplateSeed(
        NotificationType.project_added, "default", "Added to Project",
        "%s added you to project: %s", "args: inviter, project",
    ),
    TemplateSeed(
        NotificationType.task_assigned, "default", "New Task Assignment",
        "%s assigned you to: %s", "args: assigner, task",
    ),
    TemplateSeed(
        NotificationType.task_unassigned, "default", "Task Unassigned",
        "You were removed from task: %s", "args: task, unassigner",
    ),
    TemplateSeed(
        NotificationType.task_updated, "default", "Task Updated",
        'Task "%s" was updated by %s', "args: task, updater",
    ),
    TemplateSeed(
        NotificationType.task_updated, "metadata_change", "Task Metadata Updated",
        '%s updated metadata for "%s"', "args: actor, task",
    ),
    TemplateSeed(
        NotificationType.task_comment, "default", "New Comment on Your Task",
        '%s commented on "%s"', "args: commenter, task",
    ),
    TemplateSeed(
        NotificationType.comment_mention, "default", "You were mentioned",
        '%s mentioned you in "%s"', "args: commenter, task",
    ),
    TemplateSeed(
        NotificationType.form_assigned, "default", "New Form Assignment",
        "%s assigned you to form: %s", "args: assigner, form",
    ),
    TemplateSeed(
        NotificationType.form_unassigned, "default", "Form Unassigned",
        "You were removed from form: %s", "args: form, unassigner",
    ),
    TemplateSeed(
        NotificationType.entity_assigned, "default", "New Assignment",
        "%s assigned you to: %s", "args: assigner, entity",
    ),
    TemplateSeed(
        NotificationType.approval_requested, "default", "Approval Required",
        "%s requested approval for: %s", "args: requester, entity",
    ),
    TemplateSeed(
        NotificationType.approval_requested, "requester_confirmation",
        "Approval Request Submitted",
        'Your approval request for "%s" has been submitted and is pending review',
        "args: entity",
    ),
    TemplateSeed(
        NotificationType.approval_requested, "comment_notification",
        "New Approval Comment", '%s commented on "%s": %s',
        "args: commenter, entity, preview",
    ),
    TemplateSeed(
        NotificationType.approval_requested, "response_notification",
        "New Approval Response", '%s responded to "%s" with: %s',
        "args: responder, entity, status",
    ),
    TemplateSeed(
        NotificationType.approval_status_changed, "default", "Approval Update: %s",
        'Your approval request "%s" has been %s by %s',
        "args: entity, status, actor",
    ),
    TemplateSeed(
        NotificationType.approval_status_changed, "approver_update",
        "Approval Update: %s", '"%s" has been %s by %s',
        "args: entity, status, actor",
    ),
    TemplateSeed(
        NotificationType.approval_status_changed, "response_received",
        "Approval Response Received",
        '%s responded to your approval request for "%s"',
        "args: responder, entity",
    ),
)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def _substitute(pattern: str, args: Sequence[Any]) -> str:
    rendered = []
    arg_index = 0
    position = 0
    while position < len(pattern):
        char = pattern[position]
        if char != "%":
            rendered.append(char)
            position += 1
            continue

        directive = pattern[position + 1 : position + 2]
        if directive == "%":
            rendered.append("%")
        elif directive == "s":
            # IndexError when the template wants more args than given
            rendered.append(_to_text(args[arg_index]))
            arg_index += 1
        else:
            raise ValueError(f"Unsupported placeholder: %{directive}")
        position += 2
    return "".join(rendered)


def render_template(pattern: Optional[str], args: Optional[Sequence[Any]]) -> str:
    """
    Fill positional placeholders in ``pattern`` from ``args``.

    Returns the raw pattern when there are no args, more than
    MAX_TEMPLATE_ARGS args, or the pattern cannot be filled from them.
    """
    if pattern is None:
        return ""
    if not args or len(args) > MAX_TEMPLATE_ARGS:
        return pattern
    try:
        return _substitute(pattern, list(args))
    except (IndexError, ValueError):
        return pattern
