class TeamValidator:
    @staticmethod
    def validate(roster: list, captain, keeper) -> dict:
        """
        Validate a team's roster.

        Rules:
        1. At least 2 players (one batter cannot bat alone)
        2. No player listed twice
        3. Captain and keeper are on the roster
        """
        errors = []

        if len(roster) < 2:
            errors.append(f"Roster needs at least 2 players, got {len(roster)}")

        if len(set(roster)) != len(roster):
            errors.append("Roster lists the same player more than once")

        if captain not in roster:
            errors.append(f"Captain {captain} is not on the roster")
        if keeper not in roster:
            errors.append(f"Keeper {keeper} is not on the roster")

        return {
            "valid": len(errors) == 0,
            "errors": errors,
            "breakdown": {
                "players": len(roster),
                "max_wickets": max(len(roster) - 1, 0),
            }
        }
