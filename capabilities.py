"""Role-derived capabilities.

Every write control in the dashboard is enabled by exactly one of these.
"""

from schemas import Role


def can_edit_routine(role: Role) -> bool:
    return role == Role.admin


def can_post_note(role: Role) -> bool:
    return role == Role.admin


def can_use_notepad(role: Role) -> bool:
    return role in (Role.teacher, Role.admin)


def can_select_class(role: Role) -> bool:
    # students are pinned to their own class
    return role != Role.student
