"""HTML rendering of the viewer pages."""
from html import escape
from typing import List, Optional
from urllib.parse import quote, urlencode, urlparse

from viewer.countdown import REFRESH_SECONDS, Countdown
from viewer.state import ALL, FilterState
from viewer.view_model import EventCard, PageViewModel

STYLE = """
      :root {
        --primary: #e63946;
        --secondary: #f4d35e;
        --accent: #2ec4b6;
        --dark: #1d1a2f;
      }
      * { box-sizing: border-box; }
      body {
        margin: 0;
        font-family: "Poppins", sans-serif;
        color: white;
        background: linear-gradient(160deg, var(--dark) 0%, #3a1c4a 100%);
        min-height: 100vh;
      }
      .container { max-width: 960px; margin: 0 auto; padding: 24px 16px 60px; }
      .countdown { display: flex; gap: 16px; align-items: baseline; }
      .countdown strong { font-size: 2rem; color: var(--secondary); }
      .filters { display: flex; flex-wrap: wrap; gap: 8px; margin: 12px 0; }
      .filter-btn {
        padding: 6px 12px; border-radius: 999px; color: white;
        border: 1px solid rgba(255,255,255,0.3); text-decoration: none;
      }
      .filter-btn.active { background: var(--primary); border-color: var(--primary); }
      .events-list { display: grid; gap: 12px; }
      .event-card {
        display: flex; gap: 16px; align-items: center; padding: 12px;
        border-radius: 12px; background: rgba(255,255,255,0.08);
      }
      .event-date { display: grid; text-align: center; min-width: 56px; }
      .event-date .day { font-size: 1.6rem; font-weight: 700; }
      .event-info { flex: 1; }
      .event-info a { color: white; text-decoration: none; }
      .event-meta { display: flex; flex-wrap: wrap; gap: 12px; font-size: 0.9rem; opacity: 0.8; }
      .event-actions { display: flex; gap: 8px; }
      .action-btn {
        background: transparent; border: none; color: white; font-size: 1.3rem;
        cursor: pointer; text-decoration: none;
      }
      .conflict-badge {
        font-size: 0.75rem; background: var(--secondary); color: var(--dark);
        padding: 2px 8px; border-radius: 999px;
      }
      .empty-state { opacity: 0.7; text-align: center; padding: 24px; }
      .detail { background: rgba(255,255,255,0.08); border-radius: 12px; padding: 20px; }
      .detail-actions { display: flex; gap: 1rem; margin-top: 1.5rem; }
      .detail-actions .button {
        flex: 1; padding: 1rem; border: none; border-radius: 8px; cursor: pointer;
        font-family: inherit; font-size: 1rem; text-align: center; text-decoration: none;
      }
      .button.calendar { background: var(--primary); color: white; }
      .button.save { background: var(--secondary); color: var(--dark); width: 100%; }
"""


def _page(body: str, title: str = 'FOMOff - Tu Radar Anti-FOMO', refresh: bool = False) -> str:
    refresh_tag = (
        f'<meta http-equiv="refresh" content="{REFRESH_SECONDS}">' if refresh else ''
    )
    return f"""<!doctype html>
<html lang="es">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    {refresh_tag}
    <title>{escape(title)}</title>
    <style>{STYLE}</style>
  </head>
  <body>
    <main class="container">
      <header><h1><a href="/" class="action-btn">🎭 FOMOff</a></h1></header>
{body}
    </main>
  </body>
</html>
"""


def _safe_url(url: Optional[str]) -> Optional[str]:
    """Only link out to http(s) addresses."""
    if url and urlparse(url.strip()).scheme.lower() in ('http', 'https'):
        return url.strip()
    return None


def _event_path(prefix: str, event_id: str) -> str:
    return f"/{prefix}/{quote(event_id, safe='')}"


def filter_url(filters: FilterState, **changes) -> str:
    """Query URL for the main page with some filter values changed."""
    city = changes.get('city', filters.city)
    category = changes.get('category', filters.category)
    after_work = changes.get('after_work', filters.after_work)

    params = {}
    if city != ALL:
        params['city'] = city
    if category != ALL:
        params['category'] = category
    if after_work:
        params['after_work'] = '1'
    return f"/?{urlencode(params)}" if params else '/'


def _filter_button(label: str, href: str, active: bool, attr: str) -> str:
    css = 'filter-btn active' if active else 'filter-btn'
    return f'<a class="{css}" {attr} href="{escape(href)}">{escape(label)}</a>'


def render_filters(vm: PageViewModel) -> str:
    filters = vm.filters

    cities = [_filter_button(
        'Todas', filter_url(filters, city=ALL), filters.city == ALL, 'data-city="all"'
    )]
    for code, city in vm.city_options:
        cities.append(_filter_button(
            f"{city.emoji} {city.name}", filter_url(filters, city=code),
            filters.city == code, f'data-city="{escape(code)}"'
        ))

    categories = [_filter_button(
        'Todas', filter_url(filters, category=ALL), filters.category == ALL,
        'data-category="all"'
    )]
    for code, category in vm.category_options:
        categories.append(_filter_button(
            f"{category.emoji} {category.name}", filter_url(filters, category=code),
            filters.category == code, f'data-category="{escape(code)}"'
        ))

    after_work = _filter_button(
        '🌙 After work (17h+)',
        filter_url(filters, after_work=not filters.after_work),
        filters.after_work, 'id="afterWorkFilter"'
    )

    return f"""
      <section class="filters" id="cityFilter">{''.join(cities)}</section>
      <section class="filters" id="categoryFilter">{''.join(categories)}</section>
      <section class="filters">{after_work}</section>"""


def render_countdown(countdown: Countdown) -> str:
    if countdown.arrived:
        return (
            '<section class="countdown" id="countdown">'
            '<span class="countdown-label">🎭 ¡EL CARNAVAL ESTÁ AQUÍ!</span></section>'
        )
    return f"""
      <section class="countdown" id="countdown">
        <span><strong id="days">{countdown.days}</strong> días</span>
        <span><strong id="hours">{countdown.hours}</strong> horas</span>
      </section>"""


def _save_form(card: EventCard, next_url: str, css: str = 'action-btn save-btn') -> str:
    if card.saved:
        css += ' saved'
    label = '⭐' if card.saved else '☆'
    return f"""
          <form method="post" action="{escape(_event_path('saved', card.event.id))}">
            <input type="hidden" name="next" value="{escape(next_url)}">
            <button class="{css}" data-id="{escape(card.event.id)}" title="Guardar">{label}</button>
          </form>"""


def render_card(card: EventCard, next_url: str) -> str:
    """Render one event card with its save and calendar actions."""
    event = card.event
    conflict = '<span class="conflict-badge">⚠️ Conflicto</span>' if card.conflict else ''
    price = f'<span>💰 {escape(event.price)}</span>' if event.price else ''
    day = card.day if card.day is not None else '?'

    return f"""
        <div class="event-card {escape(event.city)}" data-id="{escape(event.id)}">
          <div class="event-date">
            <span class="day">{day}</span>
            <span class="month">{escape(card.month)}</span>
            <span class="weekday">{escape(card.weekday)}</span>
          </div>
          <div class="event-info">
            <h3>
              <a href="{escape(_event_path('events', event.id))}">{escape(card.category.emoji)} {escape(event.name)}</a>
              {conflict}
            </h3>
            <div class="event-meta">
              <span>{escape(card.city.emoji)} {escape(card.city.name)}</span>
              <span>🕐 {escape(event.start_time)}</span>
              <span>📍 {escape(event.venue)}</span>
              {price}
            </div>
          </div>
          <div class="event-actions">{_save_form(card, next_url)}
            <a class="action-btn calendar-btn" data-id="{escape(event.id)}" href="{escape(card.calendar_url)}"
               target="_blank" rel="noopener" title="Agregar a calendario">📅</a>
          </div>
        </div>"""


def render_list(cards: List[EventCard], next_url: str, element_id: str, empty_message: str) -> str:
    if not cards:
        return (
            f'<div class="events-list empty" id="{element_id}">'
            f'<p class="empty-state">{escape(empty_message)}</p></div>'
        )
    rendered = ''.join(render_card(card, next_url) for card in cards)
    return f'<div class="events-list" id="{element_id}">{rendered}</div>'


def render_page(vm: PageViewModel, current_url: str = '/') -> str:
    """
    Render the main page: countdown, filters, events and "Mis eventos".

    Args:
        vm: Page view model
        current_url: URL the save buttons return to

    Returns:
        Complete HTML document
    """
    last_update = (
        f'<p class="last-update">Actualizado: <span id="lastUpdate">{escape(vm.last_updated)}</span></p>'
        if vm.last_updated else ''
    )
    events = render_list(
        vm.events, current_url, 'eventsList', 'No hay eventos con estos filtros 🔍'
    )
    my_events = render_list(
        vm.my_events, current_url, 'myEventsList',
        'Aún no has agregado eventos. ¡Haz clic en ⭐ para guardar!'
    )
    body = f"""
      {render_countdown(vm.countdown)}
      {last_update}
      {render_filters(vm)}
      <h2>Eventos</h2>
      {events}
      <h2>Mis eventos</h2>
      {my_events}"""
    return _page(body, refresh=True)


def render_detail(card: EventCard) -> str:
    """Render the expanded read-only panel for one event."""
    event = card.event
    city = card.city
    next_url = _event_path('events', event.id)
    more_url = _safe_url(event.url)

    if city.travel_time > 0:
        travel = f"(~{city.travel_time} min desde Santa Marta)"
    else:
        travel = '(Base)'
    price = f'<p><strong>💰 Precio:</strong> {escape(event.price)}</p>' if event.price else ''
    official = '<p><strong>✅ Evento oficial</strong></p>' if event.official else ''
    conflict = '<p class="conflict-badge">⚠️ Conflicto con otro evento guardado</p>' if card.conflict else ''
    more = (
        f'<p><a href="{escape(more_url)}" target="_blank" rel="noopener">🔗 Más información</a></p>'
        if more_url else ''
    )
    save_label = '⭐ Guardado' if card.saved else '☆ Guardar'

    body = f"""
      <section class="detail" id="eventModal" data-id="{escape(event.id)}">
        <h2>{escape(card.category.emoji)} {escape(event.name)}</h2>
        {conflict}
        <p>{escape(event.description)}</p>
        <p><strong>📅 Fecha:</strong> {escape(card.weekday)} {card.day if card.day is not None else escape(event.date)} de {escape(card.month)}</p>
        <p><strong>🕐 Hora:</strong> {escape(event.start_time)} - {escape(event.end_time)}</p>
        <p><strong>{escape(city.emoji)} Ciudad:</strong> {escape(city.name)} {travel}</p>
        <p><strong>📍 Lugar:</strong> {escape(event.venue)}</p>
        {price}
        {official}
        <div class="detail-actions">
          <a class="button calendar" href="{escape(card.calendar_url)}" target="_blank" rel="noopener">📅 Agregar a Google Calendar</a>
          <form method="post" action="{escape(_event_path('saved', event.id))}" style="flex: 1;">
            <input type="hidden" name="next" value="{escape(next_url)}">
            <button class="button save">{save_label}</button>
          </form>
        </div>
        {more}
      </section>"""
    return _page(body, title=f"{event.name} - FOMOff")


def render_load_error() -> str:
    """Static page shown when the events document could not be loaded."""
    body = """
      <div class="events-list" id="eventsList">
        <p class="empty-state">Error cargando eventos 😢</p>
      </div>"""
    return _page(body)
