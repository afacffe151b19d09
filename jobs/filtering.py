# jobs/filtering.py
"""
Visibility filtering over a rendered page of job role cards.

This is the server-side counterpart of ``static/jobs/js/filter_job_roles.js``
and follows the same rules: a case-insensitive substring match on the role
name, exact matches on location and band, all three combined with AND.
Cards are only ever shown or hidden, never reordered or removed.
"""
import logging
import threading
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

SEARCH_DEBOUNCE_SECONDS = 0.3

HIDDEN_CLASS = 'hidden'

ROLE_ATTR = 'data-job-role'
LOCATION_ATTR = 'data-location'
BAND_ATTR = 'data-band'


@dataclass
class FilterCriteria:
    query: str = ''
    location: str = ''
    band: str = ''

    @classmethod
    def from_query_dict(cls, params):
        return cls(
            query=params.get('search') or params.get('q') or '',
            location=(params.get('location') or '').strip(),
            band=(params.get('band') or '').strip(),
        )


@dataclass
class CardElement:
    """
    Minimal stand-in for a rendered list item: string attributes, a class
    list and inline styles.
    """
    attributes: dict
    classes: set = field(default_factory=set)
    style: dict = field(default_factory=dict)
    payload: object = None

    @classmethod
    def for_job_role(cls, role):
        return cls(
            attributes={
                ROLE_ATTR: role.role_name or '',
                LOCATION_ATTR: role.location or '',
                BAND_ATTR: role.band or '',
            },
            classes={'job-card'},
            payload=role,
        )

    def get_attribute(self, name):
        return self.attributes.get(name)

    @property
    def is_hidden(self):
        return HIDDEN_CLASS in self.classes


@dataclass
class CachedCard:
    element: CardElement
    role_name_lower: str
    location: str
    band: str


def matches(card, criteria):
    query = (criteria.query or '').lower()
    matches_query = not query or query in card.role_name_lower
    matches_location = not criteria.location or card.location == criteria.location
    matches_band = not criteria.band or card.band == criteria.band
    return matches_query and matches_location and matches_band


def _show(element):
    element.classes.discard(HIDDEN_CLASS)
    element.style.pop('display', None)


def _hide(element):
    element.classes.add(HIDDEN_CLASS)
    element.style['display'] = 'none'


class JobRoleListFilter:
    """
    One instance per rendered page. ``initialize`` snapshots the cards once;
    if the list changes afterwards the snapshot is stale until a new
    instance is built. Every operation is a silent no-op before
    initialization.
    """

    def __init__(self, timer_factory=None, debounce_seconds=SEARCH_DEBOUNCE_SECONDS):
        self._timer_factory = timer_factory or _daemon_timer
        self._debounce_seconds = debounce_seconds
        self._cards = []
        self._timer = None
        self._timer_token = None
        # held for a whole pass so passes never overlap
        self._lock = threading.RLock()
        self.initialized = False
        self.passes_run = 0

    def initialize(self, elements):
        if self.initialized:
            return
        self._cards = [
            CachedCard(
                element=el,
                role_name_lower=(el.get_attribute(ROLE_ATTR) or '').lower(),
                location=el.get_attribute(LOCATION_ATTR) or '',
                band=el.get_attribute(BAND_ATTR) or '',
            )
            for el in elements
        ]
        self.initialized = True

    @property
    def cards(self):
        return list(self._cards)

    def apply(self, criteria):
        """Run one filter pass and return the elements left visible."""
        if not self.initialized:
            return []
        with self._lock:
            visible = []
            for card in self._cards:
                if matches(card, criteria):
                    _show(card.element)
                    visible.append(card.element)
                else:
                    _hide(card.element)
            self.passes_run += 1
            return visible

    def on_select_change(self, criteria):
        return self.apply(criteria)

    def on_search_input(self, criteria):
        """Restart the idle timer; the pass runs once typing has paused."""
        if not self.initialized:
            return
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            token = object()
            self._timer_token = token
            self._timer = self._timer_factory(self._debounce_seconds, self._run_pending, (criteria, token))
            self._timer.start()

    def _run_pending(self, criteria, token):
        with self._lock:
            # a superseded timer that fired anyway leaves the newer one alone
            if token is not self._timer_token:
                return
            self._timer = None
            self._timer_token = None
            self.apply(criteria)

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._timer_token = None


def _daemon_timer(interval, function, args):
    timer = threading.Timer(interval, function, args=args)
    timer.daemon = True
    return timer


def filter_job_roles(job_roles, criteria):
    """
    Apply the card filter to job role records and return the ones left
    visible, in their original order.
    """
    controller = JobRoleListFilter()
    controller.initialize([CardElement.for_job_role(role) for role in job_roles])
    visible = controller.apply(criteria)
    logger.debug("Card filter kept %d of %d job roles", len(visible), len(job_roles))
    return [el.payload for el in visible]
