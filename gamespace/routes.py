from __future__ import annotations

from flask import (
    Blueprint,
    abort,
    current_app,
    flash,
    jsonify,
    redirect,
    render_template_string,
    request,
    url_for,
)

from .errors import LauncherError, ValidationError
from .facade import LauncherFacade
from .models import Game, GameInput
from .templates import EDIT_HTML, INDEX_HTML

bp = Blueprint("gamespace", __name__)


def _launcher() -> LauncherFacade:
    return current_app.extensions["gamespace"]


def _game_or_404(game_id: str) -> tuple[int, Game]:
    launcher = _launcher()
    idx = launcher.store.index_of(game_id)
    if idx < 0:
        abort(404)
    return idx, launcher.get(idx)


def _wants_json() -> bool:
    return request.accept_mimetypes.accept_json and not request.accept_mimetypes.accept_html


def _form_input() -> GameInput:
    return GameInput(
        name=request.form.get("name", ""),
        path=request.form.get("path", ""),
        args=request.form.get("args", ""),
    )


@bp.get("/")
def index():
    launcher = _launcher()
    selected_id = request.args.get("selected", "")
    selected = launcher.store.find(selected_id) if selected_id else None
    return render_template_string(
        INDEX_HTML,
        app_title=current_app.config["APP_TITLE"],
        data_file=current_app.config["DATA_FILE"],
        games=launcher.records,
        selected=selected,
        running_ids=launcher.running_ids(),
        dirty=launcher.store.dirty,
        console_lines=launcher.console.lines(),
        console_seq=launcher.console.seq,
    )


# --- add / edit ---

@bp.get("/add")
def add_game():
    return render_template_string(
        EDIT_HTML,
        app_title=current_app.config["APP_TITLE"],
        game=None,
        form=GameInput(name="", path="", args=""),
    )


@bp.post("/add")
def add_game_post():
    return _save_form(None)


@bp.get("/edit/<game_id>")
def edit_game(game_id):
    _, game = _game_or_404(game_id)
    return render_template_string(
        EDIT_HTML,
        app_title=current_app.config["APP_TITLE"],
        game=game,
        form=GameInput(name=game.name, path=game.path, args=game.args),
    )


@bp.post("/edit/<game_id>")
def edit_game_post(game_id):
    _game_or_404(game_id)
    return _save_form(game_id)


def _save_form(game_id):
    if request.form.get("action") == "cancel":
        return redirect(url_for("gamespace.index", selected=game_id or ""))

    data = _form_input()
    try:
        game = _launcher().add_or_edit(game_id, data)
    except ValidationError as e:
        flash(e.message)
        return render_template_string(
            EDIT_HTML,
            app_title=current_app.config["APP_TITLE"],
            game=_launcher().store.find(game_id) if game_id else None,
            form=data,
        ), 400
    except LauncherError as e:
        # record is kept in memory; the index page shows it as unsaved
        current_app.logger.error("Save failed: %s", e)
        flash(str(e))
        return redirect(url_for("gamespace.index"))

    flash(("Edited " if game_id else "Added ") + game.name + ".")
    return redirect(url_for("gamespace.index", selected=game.id))


@bp.post("/remove/<game_id>")
def remove_game(game_id):
    try:
        game = _launcher().remove_id(game_id)
        flash(f"Removed {game.name}.")
    except KeyError:
        abort(404)
    except LauncherError as e:
        current_app.logger.error("Remove failed: %s", e)
        flash(str(e))
    return redirect(url_for("gamespace.index"))


# --- launch / test ---

@bp.post("/launch/<game_id>")
def launch_game(game_id):
    idx, game = _game_or_404(game_id)
    try:
        session = _launcher().launch(idx)
        ok, msg = True, f"Launched {game.name}."
        pid = session.pid
    except LauncherError as e:
        ok, msg, pid = False, str(e), None
        current_app.logger.warning("Launch of %s failed: %s", game.name, e)

    if _wants_json():
        body = {"ok": ok, ("message" if ok else "error"): msg}
        if ok:
            body["pid"] = pid
        return jsonify(body), 200 if ok else 500

    flash(("Launch requested. " if ok else "Launch failed: ") + msg)
    return redirect(url_for("gamespace.index", selected=game_id))


@bp.post("/test/<game_id>")
def test_path(game_id):
    _, game = _game_or_404(game_id)
    exists = _launcher().test_path(game)
    if _wants_json():
        return jsonify({"exists": exists, "path": game.path})
    flash("Path exists." if exists else f"Path NOT found: {game.path}")
    return redirect(url_for("gamespace.index", selected=game_id))


# --- import / export ---

@bp.post("/import")
def import_games():
    path = request.form.get("path", "").strip()
    if not path:
        flash("Choose a file to import.")
        return redirect(url_for("gamespace.index"))
    if request.form.get("confirm") != "yes":
        flash("Importing replaces the current list. Tick the confirmation box.")
        return redirect(url_for("gamespace.index"))
    try:
        records = _launcher().import_from(path)
        flash(f"Imported {len(records)} game(s) from {path}.")
    except LauncherError as e:
        current_app.logger.error("Import failed: %s", e)
        flash(f"Import failed: {e}")
    return redirect(url_for("gamespace.index"))


@bp.post("/export")
def export_games():
    path = request.form.get("path", "").strip()
    if not path:
        flash("Choose a destination file.")
        return redirect(url_for("gamespace.index"))
    try:
        _launcher().export_to(path)
        flash(f"Exported to {path}.")
    except LauncherError as e:
        current_app.logger.error("Export failed: %s", e)
        flash(f"Export failed: {e}")
    return redirect(url_for("gamespace.index"))


@bp.post("/save")
def save_games():
    try:
        _launcher().save()
        flash("Saved.")
    except LauncherError as e:
        flash(str(e))
    return redirect(url_for("gamespace.index"))


# --- console ---

@bp.get("/console")
def console():
    launcher = _launcher()
    since = request.args.get("since", type=int)
    return jsonify({
        "lines": launcher.console.lines(since),
        "seq": launcher.console.seq,
        "running": sorted(launcher.running_ids()),
    })


@bp.post("/console/clear")
def console_clear():
    _launcher().console.clear()
    return redirect(url_for("gamespace.index"))


@bp.get("/favicon.ico")
def favicon():
    return ("", 204)
