# spacewar

A terminal arcade game. You steer a ship around a 90×26 arena while arrows fly in
from the edges and red zones open up on the floor. Every frame you survive adds a
point to your score, and arrows come more often as the frames add up.

It runs in a curses terminal, so it needs a POSIX system.

## Playing

Start the menu:

    spacewar

The menu has five entries: SCOREBOARD, 1 PLAYER, 2P HOST, 2P JOIN and EXIT. Move
with the up and down arrow keys (or `k` and `j`), press Enter to choose, and `q`
or Esc to leave. If the terminal is smaller than the menu window, the menu asks
you to resize it.

In a game:

- Arrow keys move your ship; it cannot leave the arena.
- `1` uses your invincibility item (100 frames).
- `2` uses your heal item (one life back, three at most).
- `3` uses your slow item (arrows move at half speed for 200 frames).
- `q` ends the game.

Each pilot starts with three lives and one of each item. Being hit by an arrow or
standing in a red zone costs a life; after a hit you cannot be hurt again for 40
frames. Every 10 seconds a special wave of `#` arrows comes in for 60 frames, and
every 20 seconds a new red zone appears and lasts 200 frames.

### Single player

    spacewar-single

The game ends when your lives run out or you press `q`; the last screen shows
your score and the level reached (one level per 100 points).

### Two players

One player hosts a server (TCP port 8888 unless `--port` is given; `--host`
chooses the address to listen on):

    spacewar-server

Both players then connect to it:

    spacewar-client 127.0.0.1

Give the host's address instead of `127.0.0.1` when joining from another
machine, and `--port` if the server uses another port. Choosing 2P HOST in the
menu starts `spacewar-server` in the background and joins it at `127.0.0.1`;
2P JOIN asks for an address (`127.0.0.1` if left empty).

The game starts after a five-second countdown once both players are connected.
Player 1 is drawn as `@` and player 2 as `$`. Every 100 frames each ship fires a
ring of eight arrows that cannot hurt the ship that fired them. The last pilot
with lives left wins; if a player disconnects, the other one wins. After a round
the client reconnects and waits for the next one in five seconds; press `q` to
leave.

## Scores

Scores are kept in `scores.dat` in the directory you start the menu from, as
fixed-size binary records of name, score, mode (`SINGLE` or `MULTI`) and time.
The scoreboard shows the ten best, highest first; among equal scores the newest
comes first. The highest score also appears at the bottom of the menu.

When the menu starts a game it passes the path of an empty temporary file in the
`SPACEWAR_SCORE_FILE` environment variable. After the game exits it reads an
integer from the start of that file, deletes it, and, if the number is above
zero, saves it under the name you entered and shows it.

## What it does not do

`spacewar-single` and `spacewar-client` do not write their final score to the
file named by `SPACEWAR_SCORE_FILE`, so games started from the menu do not add
entries to the scoreboard by themselves. `spacewar.score.ScoreBoard.save` can be
used to record a score directly.

## As a library

- `spacewar.game_logic`: `new_game`, `update_game`, `spawn_arrow`,
  `spawn_redzone`, `create_player_attack`, `check_collisions` and `TimedEvents`
  run the rules on a `spacewar.models.GameState`.
- `spacewar.items`: `use_item(player, item_type)` with item numbers 1 to 3.
- `spacewar.protocol`: `encode_packet`, `decode_packet` and `PacketStream`
  for the fixed-size packets used between server and clients.
- `spacewar.score`: `ScoreBoard` with `load`, `top`, `high_score` and `save`.
- `spacewar.server.GameServer` and `spacewar.client.GameClient` for the
  network game.

## Tests

    pip install -e .[test]
    pytest