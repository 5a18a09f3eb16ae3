import uuid
from datetime import datetime, timezone

from draftroom import db


def get_utc_time():
    """Get current time in UTC"""
    return datetime.now(timezone.utc)


def new_auction_id() -> str:
    return uuid.uuid4().hex


class Auction(db.Model):
    """One auction session: configuration, live runtime state and history.

    List and map fields are JSON columns. They must be reassigned on every
    change, never mutated in place, or the ORM will not notice the write.
    """
    id = db.Column(db.String(32), primary_key=True, default=new_auction_id)
    name = db.Column(db.String(60), nullable=False)
    name_lower = db.Column(db.String(60), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(128), nullable=True)
    visibility = db.Column(db.String(10), nullable=False, default='private')
    admin_id = db.Column(db.String(64), nullable=False)
    admin_name = db.Column(db.String(20), nullable=False, default='Admin')

    # Configuration, immutable after creation
    max_participants = db.Column(db.Integer, nullable=False)
    players_per_team = db.Column(db.Integer, nullable=False)
    budget_per_player = db.Column(db.Integer, nullable=False)
    total_players = db.Column(db.Integer, nullable=False, default=0)
    categories = db.Column(db.JSON, nullable=False, default=list)

    participant_count = db.Column(db.Integer, nullable=False, default=1)
    status = db.Column(db.String(10), nullable=False, default='lobby', index=True)

    # Live runtime state
    current_player_index = db.Column(db.Integer, nullable=False, default=-1)
    countdown_ends_at = db.Column(db.BigInteger, nullable=True)  # epoch ms
    countdown_duration = db.Column(db.Integer, nullable=True)    # ms
    active_bid = db.Column(db.JSON, nullable=True)
    skip_votes = db.Column(db.JSON, nullable=False, default=list)
    is_paused = db.Column(db.Boolean, nullable=False, default=False)
    paused_remaining_ms = db.Column(db.Integer, nullable=True)
    manual_player = db.Column(db.JSON, nullable=True)
    manual_source_id = db.Column(db.String(64), nullable=True)
    # Set once the queue is done or the admin ends early; a relist never reopens it
    bidding_closed = db.Column(db.Boolean, nullable=False, default=False)

    # History and post-auction
    completed_players = db.Column(db.JSON, nullable=False, default=list)
    finalization_open = db.Column(db.Boolean, nullable=False, default=False)
    results = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, default=get_utc_time)
    updated_at = db.Column(db.DateTime, default=get_utc_time, onupdate=get_utc_time)
    version = db.Column(db.Integer, nullable=False)

    participants = db.relationship(
        'Participant',
        backref='auction',
        lazy=True,
        order_by='Participant.joined_at, Participant.id',
    )

    __mapper_args__ = {'version_id_col': version}

    def __repr__(self):
        return f'<Auction {self.name} status={self.status}>'


class Participant(db.Model):
    """A joined user within one auction (client id is the identity)."""
    __table_args__ = (
        db.UniqueConstraint('auction_id', 'client_id', name='uq_participant_client'),
    )

    id = db.Column(db.Integer, primary_key=True)
    auction_id = db.Column(db.String(32), db.ForeignKey('auction.id'), nullable=False, index=True)
    client_id = db.Column(db.String(64), nullable=False)
    name = db.Column(db.String(20), nullable=False)
    role = db.Column(db.String(10), nullable=False, default='player')
    joined_at = db.Column(db.DateTime, default=get_utc_time)

    budget_remaining = db.Column(db.Integer, nullable=False)
    players_needed = db.Column(db.Integer, nullable=False)
    roster = db.Column(db.JSON, nullable=False, default=list)

    has_submitted_team = db.Column(db.Boolean, nullable=False, default=False)
    final_roster = db.Column(db.JSON, nullable=True)
    ranking_submitted = db.Column(db.Boolean, nullable=False, default=False)
    rankings = db.Column(db.JSON, nullable=False, default=dict)

    version = db.Column(db.Integer, nullable=False)

    __mapper_args__ = {'version_id_col': version}

    @property
    def roster_value(self) -> int:
        return sum(entry['price'] for entry in self.roster or [])

    def __repr__(self):
        return f'<Participant {self.name} in {self.auction_id}>'
