import logging

logger = logging.getLogger(__name__)


def create_exercise_views(db):
    """Create all necessary views for exercise catalog queries."""

    # View for finding a user's exercise definitions
    scope_view = {
        "map": """
        function(doc) {
            if (doc.type === 'exercise' && doc.appId && doc.userId) {
                emit([doc.appId, doc.userId], null);
            }
        }
        """,
    }

    design_doc = {
        "_id": "_design/exercises",
        "views": {
            "by_scope": scope_view,
        },
    }

    try:
        db.save(design_doc)
        return True
    except Exception as e:
        logger.error(f"Error creating exercise views: {e}")
        return False


def create_workout_views(db):
    """Create all necessary views for workout queries."""

    # View for finding a user's workouts
    scope_view = {
        "map": """
        function(doc) {
            if (doc.type === 'workout' && doc.appId && doc.userId) {
                emit([doc.appId, doc.userId], null);
            }
        }
        """,
    }

    design_doc = {
        "_id": "_design/workouts",
        "views": {
            "by_scope": scope_view,
        },
    }

    try:
        db.save(design_doc)
        return True
    except Exception as e:
        logger.error(f"Error creating workout views: {e}")
        return False


def create_sync_filters(db):
    """Create the changes-feed filter used by live subscriptions.

    Deleted documents keep their scope fields (see ``Database.delete``), so
    the same filter passes their deletion revisions through.
    """
    design_doc = {
        "_id": "_design/scoped",
        "filters": {
            "by_scope": """
            function(doc, req) {
                return doc.type === req.query.doc_type &&
                    doc.appId === req.query.app_id &&
                    doc.userId === req.query.user_id;
            }
            """,
        },
    }

    try:
        db.save(design_doc)
        return True
    except Exception as e:
        logger.error(f"Error creating sync filters: {e}")
        return False
