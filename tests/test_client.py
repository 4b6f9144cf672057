import curses
import socket
import time

import pytest

from spacewar.client import GameClient
from spacewar.game_logic import make_arrow, new_game
from spacewar.models import Packet, PacketType, Player, RedZone
from spacewar.protocol import PacketStream


def wait_for(condition, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


@pytest.fixture
def listener():
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.bind(("127.0.0.1", 0))
    srv.listen(1)
    srv.settimeout(5)
    yield srv
    srv.close()


@pytest.fixture
def connected(listener):
    client = GameClient("127.0.0.1", listener.getsockname()[1])
    client.connect()
    conn, _ = listener.accept()
    conn.settimeout(5)
    peer = PacketStream(conn)
    yield client, peer
    client.close()
    peer.close()


def initial(player_id, state=None):
    return Packet(PacketType.INITIAL_STATE, id=player_id,
                  game_state=state if state is not None else new_game(True))


def test_initial_state_assigns_id_and_world():
    client = GameClient()
    state = new_game(True)
    state.frame = 7
    client.apply_packet(initial(1, state))
    assert client.id == 1
    assert client.state.frame == 7
    assert client.state.players[0].x == 30


def test_arrow_update_replaces_arrows():
    client = GameClient()
    packet = Packet(PacketType.ARROW_UPDATE)
    packet.arrows[0] = make_arrow(5, 5, 10, 5, 0, -1)
    client.apply_packet(packet)
    assert client.state.arrows[0] == packet.arrows[0]
    assert client.state.arrows[0].active


def test_redzone_update_replaces_zones():
    client = GameClient()
    packet = Packet(PacketType.REDZONE_UPDATE)
    packet.redzones[2] = RedZone(x=4, y=5, width=6, height=3, active=True, lifetime=200)
    client.apply_packet(packet)
    assert client.state.redzones[2] == packet.redzones[2]


def test_player_status_updates_player():
    client = GameClient()
    player = Player(id=1, x=12, y=8, connected=True, lives=2)
    client.apply_packet(Packet(PacketType.PLAYER_STATUS, id=1, player=player))
    assert client.state.players[1] == player


def test_player_status_with_bad_id_is_ignored():
    client = GameClient()
    before = [Player(**vars(p)) for p in client.state.players]
    client.apply_packet(Packet(PacketType.PLAYER_STATUS, id=5,
                               player=Player(connected=True, lives=3)))
    assert client.state.players == before


def test_game_over_records_winner():
    client = GameClient()
    client.apply_packet(Packet(PacketType.GAME_OVER, id=1))
    assert client.game_over
    assert client.winner == 1
    assert client.running is False


def test_move_without_id_raises():
    client = GameClient()
    with pytest.raises(RuntimeError):
        client.move(curses.KEY_LEFT)


def test_use_item_without_connection_raises():
    client = GameClient()
    client.apply_packet(initial(0))
    with pytest.raises(RuntimeError):
        client.use_item(1)


def test_move_sends_new_position(connected):
    client, peer = connected
    client.apply_packet(initial(0))
    start_x = client.state.players[0].x
    start_y = client.state.players[0].y
    assert client.move(curses.KEY_LEFT) is True
    packet = peer.receive()
    assert packet.type == PacketType.PLAYER_MOVE
    assert packet.id == 0
    assert (packet.x, packet.y) == (start_x - 1, start_y)
    assert client.state.players[0].x == start_x - 1


def test_move_blocked_by_wall(connected):
    client, _ = connected
    state = new_game(True)
    state.players[0].x = 1
    client.apply_packet(initial(0, state))
    assert client.move(curses.KEY_LEFT) is False
    assert client.state.players[0].x == 1


def test_move_ignores_other_keys(connected):
    client, _ = connected
    client.apply_packet(initial(0))
    assert client.move(ord("x")) is False


def test_use_item_sends_item_packet(connected):
    client, peer = connected
    client.apply_packet(initial(1))
    client.use_item(3)
    packet = peer.receive()
    assert packet.type == PacketType.ITEM_USE
    assert packet.id == 1
    assert packet.item_type == 3


def test_receive_thread_applies_game_over(connected):
    client, peer = connected
    peer.send(Packet(PacketType.GAME_OVER, id=1))
    assert wait_for(lambda: client.game_over)
    assert client.winner == 1


def test_receive_thread_applies_initial_state(connected):
    client, peer = connected
    peer.send(initial(1))
    assert wait_for(lambda: client.id == 1)
    assert client.state.multiplay is True


def test_server_closing_stops_client(connected):
    client, peer = connected
    peer.close()
    wait_for(lambda: not client.running)
    assert client.running is False
    assert client.game_over is False
    assert client.winner == -1