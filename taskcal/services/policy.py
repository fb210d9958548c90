"""
Authorization policy.

Pure decision functions over an actor (anything with ``id`` and ``role``,
normally the request's ``TokenData``) and the resource in question. No I/O
happens here; the ``ensure_*`` variants raise the matching API error.

Task visibility is strictly per owner for every role: admins list only
their own tasks, yet may edit or delete anyone's task. This asymmetry is
intentional and must not be widened to a global admin listing.
"""
from typing import Callable

from taskcal.errors import PermissionDenied, SelfActionForbidden
from taskcal.models.user import Role


def _is_admin(actor) -> bool:
    return actor.role == Role.ADMIN


def can_view(actor) -> Callable[[object], bool]:
    """Predicate selecting the tasks ``actor`` may see in listings."""
    actor_id = actor.id
    return lambda task: task.owner_id == actor_id


def can_mutate(actor, task) -> bool:
    return actor.id == task.owner_id or _is_admin(actor)


def ensure_can_mutate(actor, task) -> None:
    if not can_mutate(actor, task):
        raise PermissionDenied()


def can_manage_users(actor) -> bool:
    return _is_admin(actor)


def ensure_can_manage_users(actor) -> None:
    if not can_manage_users(actor):
        raise PermissionDenied("Admin access required")


def can_change_role(actor, target_id: int) -> bool:
    return can_manage_users(actor) and target_id != actor.id


def ensure_can_change_role(actor, target_id: int) -> None:
    ensure_can_manage_users(actor)
    if target_id == actor.id:
        raise SelfActionForbidden("Cannot change your own role")


def can_delete_user(actor, target_id: int) -> bool:
    return can_manage_users(actor) and target_id != actor.id


def ensure_can_delete_user(actor, target_id: int) -> None:
    ensure_can_manage_users(actor)
    if target_id == actor.id:
        raise SelfActionForbidden("Cannot delete your own account")
