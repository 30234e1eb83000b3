"""Event registration rosters: validation, edit-window lifecycle and season statistics."""
