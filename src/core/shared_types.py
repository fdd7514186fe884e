"""
Type definitions used across layers
"""

from enum import StrEnum

# Sentinel value of a revealed diamond, both in the hidden field and on the wire.
DIAMOND = 9

# Key under which the running total is serialized next to the player scores.
TOTAL_KEY = "total"


class Status(StrEnum):
    WAITING_FOR_PLAYERS = "waiting for players"
    IN_PLAY = "in play"
    FINISHED = "finished"
