"""Example: drive the attendance service layer directly (no Flask).

Controllers stay thin; the reconciliation rules live in the services.
"""

import importlib

from config import get_settings_module

from src.attendance_hub.attendance_hub.container import build_container
from src.attendance_hub.attendance_hub.core.enums import GuardianType
from src.attendance_hub.attendance_hub.attendance.model import Operator


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(api_config=settings.API_CONFIG)
    service = container.attendance_service

    board = service.open_board(branch_id=None)
    print(board.summary())

    views = board.views()
    if not views:
        return
    pending, guardians = service.select_person(board, str(views[0].person.id), operator_key="example")
    print(pending.prompt, [g.name for g in guardians])
    outcome = service.choose_guardian(
        board,
        GuardianType.CAPTAIN,
        operator_key="example",
        operator=Operator(name="Example Staff", role="Staff"),
    )
    print(outcome.view.to_dict())
    container.close()


if __name__ == "__main__":
    main()
