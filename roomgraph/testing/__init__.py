from roomgraph.testing.fixtures import (
    PlanFixture,
    bridged_rooms,
    four_room_grid,
    grid,
    l_shaped_room,
    open_path,
    rectangle,
    rectangle_with_filament,
    square_with_diagonal,
    surrounded_room,
    three_room_l_shape,
    triangle,
    two_adjacent_rooms,
)

__all__ = [
    "PlanFixture",
    "bridged_rooms",
    "four_room_grid",
    "grid",
    "l_shaped_room",
    "open_path",
    "rectangle",
    "rectangle_with_filament",
    "square_with_diagonal",
    "surrounded_room",
    "three_room_l_shape",
    "triangle",
    "two_adjacent_rooms",
]
