"""Firestore-backed implementations of application ports."""

from city_dashboard.infrastructure.firebase.repositories.record_fetcher_firestore import (
    FirestoreRecordFetcher,
)

__all__ = [
    "FirestoreRecordFetcher",
]
