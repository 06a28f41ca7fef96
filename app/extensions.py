"""Accessors for the objects the application factory attaches to the app."""

from flask import current_app


def get_store():
    return current_app.extensions['store']


def get_repositories():
    return current_app.extensions['repositories']


def get_impact_aggregator():
    return current_app.extensions['impact_aggregator']
