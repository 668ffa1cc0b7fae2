from __future__ import annotations
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import GameConfig
from .dictionary import Fetcher, WordDictionary
from .managers.game import GameManager, GameSession
from .schemas import UserSettings
from .stats import SessionStats, load_settings, save_settings
from .storage import JsonFileStore, KeyValueStore

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[GameConfig] = None,
    store: Optional[KeyValueStore] = None,
    fetcher: Optional[Fetcher] = None,
) -> FastAPI:
    """Build the REST app and its Socket.IO channel.

    The ASGI entry point that serves both is ``app.state.asgi_app``.
    """
    config = config or GameConfig()
    store = store if store is not None else JsonFileStore(config.storage_path)
    dictionary = WordDictionary(config, store, fetcher)
    stats = SessionStats(store)
    games = GameManager(config, dictionary, stats)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # warm the dictionary without holding up startup
        preload = asyncio.ensure_future(dictionary.load())
        yield
        for session_id in list(games.sessions):
            games.remove(session_id)
        if not preload.done():
            preload.cancel()

    app = FastAPI(title="Word Rush Server", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=['*'],
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    sio = socketio.AsyncServer(async_mode='asgi', cors_allowed_origins='*')

    app.state.config = config
    app.state.store = store
    app.state.dictionary = dictionary
    app.state.stats = stats
    app.state.games = games
    app.state.sio = sio
    app.state.asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)

    # REST Endpoints
    @app.get('/health')
    async def health() -> Dict[str, Any]:
        return {'ok': True, 'sessions': len(games.sessions)}

    @app.get('/config')
    async def public_config() -> Dict[str, Any]:
        return config.public()

    @app.get('/dict/validate')
    async def validate_word(word: str):
        await dictionary.load()
        return {'word': word.upper(), 'valid': dictionary.has_word(word.strip())}

    @app.get('/dict/status')
    async def dictionary_status():
        return {'status': dictionary.status, 'source': dictionary.source, 'words': dictionary.word_count()}

    @app.get('/stats')
    async def session_stats():
        return {
            'stats': stats.record.model_dump(by_alias=True),
            'highScore': stats.high_score(),
        }

    @app.get('/settings')
    async def get_settings():
        return load_settings(store).model_dump(by_alias=True)

    @app.put('/settings')
    async def put_settings(settings: UserSettings):
        saved = save_settings(store, settings)
        return {'ok': saved, 'settings': settings.model_dump(by_alias=True)}

    # Socket.IO Events
    async def _session(sid) -> Optional[GameSession]:
        session = games.get(sid)
        if session is None:
            await sio.emit('error', {'message': 'No active session'}, to=sid)
        return session

    @sio.event
    async def connect(sid, environ, auth=None):
        session = games.get_or_create(sid)

        async def forward(name, payload):
            await sio.emit(name, payload, to=sid)

        session.events.subscribe(forward)
        await sio.emit('pong', to=sid)
        await sio.emit('game:state', session.snapshot().model_dump(by_alias=True), to=sid)

    @sio.event
    async def disconnect(sid, *args):
        games.remove(sid)

    @sio.on('ping')
    async def on_ping(sid, *args):
        await sio.emit('pong', to=sid)

    @sio.on('character:select')
    async def select_character(sid, character):
        session = await _session(sid)
        if not session:
            return
        try:
            session.select_character(character)
        except ValueError as exc:
            await sio.emit('error', {'message': str(exc)}, to=sid)
            return
        await sio.emit('game:state', session.snapshot().model_dump(by_alias=True), to=sid)

    @sio.on('game:start')
    async def game_start(sid, *args):
        session = await _session(sid)
        if session:
            await session.start_round()

    @sio.on('game:submit')
    async def game_submit(sid, payload):
        session = await _session(sid)
        if not session:
            return
        word = payload.get('word') if isinstance(payload, dict) else payload
        await session.submit(word)

    @sio.on('game:shuffle')
    async def game_shuffle(sid, *args):
        session = await _session(sid)
        if session:
            await session.shuffle()

    @sio.on('game:pause')
    async def game_pause(sid, *args):
        session = await _session(sid)
        if session:
            await session.pause()

    @sio.on('game:resume')
    async def game_resume(sid, *args):
        session = await _session(sid)
        if session:
            await session.resume()

    @sio.on('game:new')
    async def game_new(sid, *args):
        session = await _session(sid)
        if session:
            session.new_game()
            await sio.emit('game:state', session.snapshot().model_dump(by_alias=True), to=sid)

    @sio.on('game:state')
    async def game_state(sid, *args):
        session = await _session(sid)
        if session:
            await sio.emit('game:state', session.snapshot().model_dump(by_alias=True), to=sid)

    return app


env_config = GameConfig.from_env()
logging.basicConfig(
    level=getattr(logging, env_config.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)

api = create_app(env_config)

# Export ASGI app for uvicorn
application = api.state.asgi_app

# For local running: uvicorn wordrush.main:application --reload --host 0.0.0.0 --port 8000
if __name__ == '__main__':
    import uvicorn
    uvicorn.run(application, host='0.0.0.0', port=8000)
