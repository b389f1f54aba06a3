"""Rent billing and payment-reconciliation engine.

``money``, ``schedule``, ``matcher`` and ``classifier`` are pure and work on
any objects carrying the rent-payment attributes. ``aggregator`` and
``bill_splitter`` read and write through the SQLAlchemy models.
"""
