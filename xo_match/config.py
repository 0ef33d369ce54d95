"""
Match configuration for the XO match engine.
Timers and intro timing, all in seconds.
"""


class MatchConfig:
    """
    Configuration for a match.

    Change these values on an instance to tune a single controller,
    or on the class to change the defaults.
    """

    # ==================== TIMERS ====================
    # Time a player has to move before forfeiting
    TIME_LIMIT = 5.0

    # Pause before a computer player moves, so its moves are visible
    AI_TURN_DELAY = 0.75

    # ==================== INTRO ====================
    # Wait before announcing who starts
    INTRO_DISPLAY_DELAY = 0.2
    # How long the announcement stays up before play begins
    INTRO_DURATION = 2.0

    # ==================== PLAYERS ====================
    # Percent chance that player two starts when first player is randomized
    FIRST_PLAYER_CHANCE = 50.0

    # ==================== DEBUG SETTINGS ====================
    # Raise InvalidStateTransitionError on out-of-phase calls instead of
    # ignoring them
    STRICT_PHASE_CHECKS = False

    @property
    def intro_total(self) -> float:
        """Full length of the intro, from match start to play."""
        return self.INTRO_DISPLAY_DELAY + self.INTRO_DURATION
