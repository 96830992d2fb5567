"""
Guild roster application package.

Layered the same way throughout:

  roster/repositories/  : in-memory storage: id allocation, lookups, name indexes.
  roster/services/      : business logic: validation, invariants, cross-entity rules.

``GuildRoster`` (in ``guild.py``) is the integration point: it creates the
repository and service instances, wires the player-removal hook into the
integrity service and exposes everything as public attributes
(e.g. ``roster.player_service``).  Route handlers in ``guild_server.py`` call
these services directly, keeping the HTTP layer free of domain rules.
"""
