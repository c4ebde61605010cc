"""Upstream source ingestion and reconciliation.

This package reads upstream terminology releases and drives the
reconcile pipeline that produces canonical code systems.
"""
