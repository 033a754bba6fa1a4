"""
Library modules for the portal access-control engine.

Usage:
    from portal_app.lib.permissions import resolve_subject, evaluate_project
    subject = resolve_subject(user_id, user_record)
    capabilities = evaluate_project(subject, project)
"""
