"""Theme management for the TUI app.

// [LAW:locality-or-seam] All theme logic here; app.py just delegates.
"""

import git_delve.settings


def restore_theme(app) -> None:
    """Apply the persisted theme choice when it is still available."""
    saved = git_delve.settings.load_theme()
    if saved and saved in app.available_themes:
        app.theme = saved


def cycle_theme(app, direction: int) -> None:
    """Cycle to the next (+1) or previous (-1) theme and persist the choice.

    // [LAW:one-type-per-behavior] One function for both directions.
    """
    names = sorted(app.available_themes.keys())
    current_index = names.index(app.theme) if app.theme in names else 0
    new_name = names[(current_index + direction) % len(names)]
    app.theme = new_name
    git_delve.settings.save_theme(new_name)
    app.notify(f"Theme: {new_name}", timeout=1)
