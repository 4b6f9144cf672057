"""A terminal arcade game for one or two players: menu, game rules, network play and scoreboard."""

__version__ = "1.3.0"