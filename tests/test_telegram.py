"""Tests for the Telegram sink and command listener."""

import threading
from unittest.mock import MagicMock

import pytest
import requests

from coachbot.commands import CommandHandler
from coachbot.errors import DeliveryError
from coachbot.telegram import TelegramBot


def ok(result=None):
    resp = MagicMock()
    resp.json.return_value = {'ok': True, 'result': result if result is not None else []}
    return resp


def update(update_id, text, chat_id=-100):
    return {'update_id': update_id, 'message': {'text': text, 'chat': {'id': chat_id}}}


@pytest.fixture
def session():
    session = MagicMock()
    session.post.return_value = ok()
    return session


@pytest.fixture
def handler():
    service = MagicMock()
    service.get_standings.return_value = 'standings text'
    return CommandHandler(service)


@pytest.fixture
def bot(session, handler):
    return TelegramBot('123:abc', -100, handler, session=session)


class TestSendMessage:
    """Tests for pushing report text to the chat."""

    def test_markdown_post(self, bot, session):
        bot.send_message('*hello*')

        args, kwargs = session.post.call_args
        assert args[0] == 'https://api.telegram.org/bot123:abc/sendMessage'
        assert kwargs['json'] == {'chat_id': -100, 'text': '*hello*', 'parse_mode': 'Markdown'}
        assert kwargs['timeout'] == 10

    def test_chat_id_not_set(self, session):
        bot = TelegramBot('123:abc', 0, session=session)
        with pytest.raises(DeliveryError, match='chat ID not set'):
            bot.send_message('hi')
        session.post.assert_not_called()

    def test_transport_error(self, bot, session):
        session.post.side_effect = requests.ConnectionError('down')
        with pytest.raises(DeliveryError) as exc:
            bot.send_message('hi')
        assert '123:abc' not in str(exc.value)

    def test_api_rejection(self, bot, session):
        resp = MagicMock()
        resp.json.return_value = {'ok': False, 'description': "Bad Request: can't parse entities"}
        session.post.return_value = resp
        with pytest.raises(DeliveryError, match="can't parse entities"):
            bot.send_message('*broken')


class TestPolling:
    """Tests for receiving and answering commands."""

    def test_offset_advances(self, bot, session):
        session.post.return_value = ok([update(7, '/help'), update(8, 'hello')])
        updates = bot.get_updates(timeout=0)

        assert [u['update_id'] for u in updates] == [7, 8]
        assert session.post.call_args.kwargs['json']['offset'] == 0

        session.post.return_value = ok([])
        bot.get_updates(timeout=0)
        assert session.post.call_args.kwargs['json']['offset'] == 9

    def test_command_answered_in_origin_chat(self, bot, session):
        reply = bot.handle_update(update(1, '/standings', chat_id=555))

        assert reply == 'standings text'
        assert session.post.call_args.kwargs['json']['chat_id'] == 555

    def test_plain_message_ignored(self, bot, session):
        assert bot.handle_update(update(1, 'nice win')) is None
        assert bot.handle_update({'update_id': 2, 'edited_message': {}}) is None
        session.post.assert_not_called()

    def test_reply_failure_logged_not_raised(self, bot, session):
        session.post.side_effect = requests.ConnectionError('down')
        assert bot.handle_update(update(1, '/standings')) is None

    def test_poll_loop_stops(self, bot, session):
        stop = threading.Event()
        replies = []

        def post(url, json, timeout):
            if url.endswith('/getUpdates'):
                stop.set()
                return ok([update(1, '/start')])
            replies.append(json['text'])
            return ok()

        session.post.side_effect = post
        bot.poll_commands(stop, timeout=0)

        assert stop.is_set()
        # Updates arriving with the stop request are not answered
        assert replies == []

    def test_poll_loop_survives_errors(self, bot, session):
        stop = threading.Event()
        calls = []

        def post(url, json, timeout):
            calls.append(url)
            if len(calls) == 1:
                raise requests.ConnectionError('down')
            if url.endswith('/getUpdates'):
                if len(calls) > 2:
                    stop.set()
                    return ok([])
                return ok([update(1, '/start')])
            return ok()

        session.post.side_effect = post
        stop_wait = stop.wait
        stop.wait = lambda timeout=None: stop_wait(0)
        bot.poll_commands(stop, timeout=0)

        assert calls[1].endswith('/getUpdates')
        assert calls[2].endswith('/sendMessage')
