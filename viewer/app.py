"""Flask application serving the FOMOff event listing."""
import logging
import os
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, abort, redirect, request

from fomoff_cli import setup_logging
from storage.json_store import StoreError
from viewer.loader import SAVED_KEY, decode_saved, encode_saved, fetch_store
from viewer.render import render_detail, render_load_error, render_page
from viewer.state import (
    ALL,
    SetAfterWork,
    SetCategoryFilter,
    SetCityFilter,
    ToggleSaved,
    ViewerState,
    reduce,
)
from viewer.view_model import build_detail, build_page

logger = logging.getLogger(__name__)

# the saved-set never expires in practice
SAVED_MAX_AGE = 10 * 365 * 24 * 60 * 60


def _safe_next(value: Optional[str]) -> str:
    """Only allow redirects back to a path on this site."""
    if value and value.startswith('/') and not value.startswith('//'):
        return value
    return '/'


def _current_state(base: ViewerState) -> ViewerState:
    """Layer the request's filters and the browser's saved-set over the store."""
    state = ViewerState(store=base.store, saved=decode_saved(request.cookies.get(SAVED_KEY)))
    state = reduce(state, SetCityFilter(request.args.get('city', ALL)))
    state = reduce(state, SetCategoryFilter(request.args.get('category', ALL)))
    state = reduce(state, SetAfterWork(request.args.get('after_work') in ('1', 'true', 'on')))
    return state


def create_app(data_location: Optional[str] = None, timeout: Optional[int] = None) -> Flask:
    """
    Create the viewer application.

    The events document is fetched once here. If that fails, every page
    shows the load-failure state for the lifetime of the app.

    Args:
        data_location: URL or path of events.json (default: FOMOFF_DATA_URL)
        timeout: HTTP timeout in seconds (default: FOMOFF_TIMEOUT_SECONDS)

    Returns:
        Configured Flask app
    """
    data_location = data_location or os.environ.get('FOMOFF_DATA_URL', 'data/events.json')
    if timeout is None:
        timeout = int(os.environ.get('FOMOFF_TIMEOUT_SECONDS', '10'))

    app = Flask(__name__)

    try:
        base_state = ViewerState(store=fetch_store(data_location, timeout=timeout))
    except StoreError as e:
        logger.error(f"Viewer started without events: {e}")
        base_state = ViewerState(store=None)

    app.config['VIEWER_STATE'] = base_state

    @app.route('/', methods=['GET'])
    def index():
        if base_state.store is None:
            return render_load_error(), 503

        state = _current_state(base_state)
        vm = build_page(state, now=datetime.now(timezone.utc))
        return render_page(vm, current_url=request.full_path.rstrip('?'))

    @app.route('/events/<event_id>', methods=['GET'])
    def event_detail(event_id):
        if base_state.store is None:
            return render_load_error(), 503

        card = build_detail(_current_state(base_state), event_id)
        if card is None:
            abort(404)
        return render_detail(card)

    @app.route('/saved/<event_id>', methods=['POST'])
    def toggle_saved(event_id):
        if base_state.store is None:
            return render_load_error(), 503
        if base_state.store.find_event(event_id) is None:
            abort(404)

        state = reduce(_current_state(base_state), ToggleSaved(event_id))
        logger.info(f"Toggled saved event {event_id} ({len(state.saved)} saved)")

        response = redirect(_safe_next(request.form.get('next')))
        response.set_cookie(
            SAVED_KEY, encode_saved(state.saved), max_age=SAVED_MAX_AGE, samesite='Lax'
        )
        return response

    return app


def main() -> None:
    """Run the viewer with Flask's development server."""
    setup_logging(os.environ.get('LOG_LEVEL', 'INFO'))
    app = create_app()
    app.run(
        host=os.environ.get('FOMOFF_HOST', '127.0.0.1'),
        port=int(os.environ.get('FOMOFF_PORT', '5000'))
    )


if __name__ == '__main__':
    main()
