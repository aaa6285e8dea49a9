from typing import Iterable, List, Optional
from uuid import UUID

from conpanion.app.services.unit_of_work import UnitOfWork

UNKNOWN_ACTOR_NAME = "Someone"


async def actor_name(uow: UnitOfWork, user_id: Optional[UUID]) -> str:
    if user_id is None:
        return UNKNOWN_ACTOR_NAME
    user = await uow.users.get_by_id(user_id)
    return user.display_name if user else UNKNOWN_ACTOR_NAME


def recipients_excluding(
    user_ids: Iterable[UUID], *excluded: Optional[UUID]
) -> List[UUID]:
    """Unique user ids in original order, minus the excluded ones"""
    skip = {user_id for user_id in excluded if user_id is not None}
    recipients = []
    for user_id in user_ids:
        if user_id in skip or user_id in recipients:
            continue
        recipients.append(user_id)
    return recipients
