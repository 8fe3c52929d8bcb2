INDEX_HTML = r"""<!doctype html>
<html lang="en" data-bs-theme="dark">
<head>
  <meta charset="utf-8">
  <title>{{ app_title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css" rel="stylesheet">
  <style>
    .card { border: 1px solid rgba(255,255,255,.08); }
    .title { white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }
    .path { color: rgba(255,255,255,.6); word-break: break-all; }
    #console { height: 240px; overflow-y: auto; font-family: monospace; font-size: 12px; white-space: pre-wrap; background:#111; }
    pre.details { white-space: pre-wrap; }
  </style>
</head>
<body>
<nav class="navbar navbar-expand-lg bg-body-tertiary px-3">
  <a class="navbar-brand" href="{{ url_for('gamespace.index') }}">{{ app_title }}</a>
  <div class="ms-auto d-flex gap-2 align-items-center">
    {% if dirty %}
      <form action="{{ url_for('gamespace.save_games') }}" method="post">
        <button class="btn btn-warning btn-sm" type="submit" title="Last save to {{ data_file }} failed">Unsaved changes: retry save</button>
      </form>
    {% endif %}
    <a class="btn btn-success btn-sm" href="{{ url_for('gamespace.add_game') }}">Add</a>
  </div>
</nav>

<div class="container-fluid py-3">
  {% with messages = get_flashed_messages() %}
    {% if messages %}
      <div class="alert alert-warning">{{ messages|join('. ') }}</div>
    {% endif %}
  {% endwith %}

  <div class="row g-3">
    <div class="col-md-5">
      {% if not games %}
        <div class="text-center py-5">
          <h5>No games yet.</h5>
          <p class="text-secondary">Add an executable, or import a list below. Saved to <code>{{ data_file }}</code>.</p>
        </div>
      {% else %}
        <div class="list-group">
          {% for g in games %}
            <a class="list-group-item list-group-item-action {% if selected and selected.id == g.id %}active{% endif %}"
               href="{{ url_for('gamespace.index', selected=g.id) }}" title="{{ g.detailed_string() }}">
              <div class="title fw-semibold">
                {{ g.name }}
                {% if g.id in running_ids %}<span class="badge text-bg-warning ms-2">Running</span>{% endif %}
              </div>
              <div class="small path">{{ g.path }}</div>
            </a>
          {% endfor %}
        </div>
      {% endif %}

      <div class="card p-3 mt-3">
        <h6>Import / Export</h6>
        <form class="mb-2" action="{{ url_for('gamespace.import_games') }}" method="post">
          <div class="input-group input-group-sm">
            <input class="form-control" type="text" name="path" placeholder="/path/to/games.txt">
            <button class="btn btn-outline-light" type="submit">Import…</button>
          </div>
          <div class="form-check small mt-1">
            <input class="form-check-input" type="checkbox" name="confirm" value="yes" id="confirmImport">
            <label class="form-check-label" for="confirmImport">Replace the current list</label>
          </div>
        </form>
        <form action="{{ url_for('gamespace.export_games') }}" method="post">
          <div class="input-group input-group-sm">
            <input class="form-control" type="text" name="path" placeholder="/path/to/export.txt">
            <button class="btn btn-outline-light" type="submit">Export…</button>
          </div>
        </form>
      </div>
    </div>

    <div class="col-md-7">
      <div class="card p-3 mb-3">
        <h6>Selected Game Details:</h6>
        {% if selected %}
          <pre class="details mb-2">{{ selected.detailed_string() }}</pre>
          <div class="d-flex flex-wrap gap-2">
            <form action="{{ url_for('gamespace.launch_game', game_id=selected.id) }}" method="post">
              <button class="btn btn-success btn-sm" type="submit" {% if selected.id in running_ids %}disabled{% endif %}>Launch</button>
            </form>
            <form action="{{ url_for('gamespace.test_path', game_id=selected.id) }}" method="post">
              <button class="btn btn-outline-info btn-sm" type="submit">Test Path</button>
            </form>
            <a class="btn btn-outline-light btn-sm" href="{{ url_for('gamespace.edit_game', game_id=selected.id) }}">Edit</a>
            <form action="{{ url_for('gamespace.remove_game', game_id=selected.id) }}" method="post"
                  onsubmit="return confirm('Remove selected game?');">
              <button class="btn btn-outline-danger btn-sm" type="submit">Remove</button>
            </form>
          </div>
        {% else %}
          <div class="text-secondary small">Select a game from the list.</div>
        {% endif %}
      </div>

      <div class="card p-3">
        <div class="d-flex align-items-center mb-2">
          <h6 class="mb-0">Console</h6>
          <form class="ms-auto" action="{{ url_for('gamespace.console_clear') }}" method="post">
            <button class="btn btn-outline-secondary btn-sm" type="submit">Clear</button>
          </form>
        </div>
        <div id="console" class="p-2 rounded">{% for line in console_lines %}{{ line }}
{% endfor %}</div>
      </div>
    </div>
  </div>
</div>

<script>
  // Poll the console buffer; the server only returns lines after `seq`.
  (function () {
    const box = document.getElementById('console');
    let seq = {{ console_seq }};
    box.scrollTop = box.scrollHeight;
    setInterval(async () => {
      try {
        const r = await fetch("{{ url_for('gamespace.console') }}?since=" + seq, {headers: {Accept: 'application/json'}});
        const data = await r.json();
        if (data.lines.length) {
          box.textContent += data.lines.join('\n') + '\n';
          box.scrollTop = box.scrollHeight;
        }
        seq = data.seq;
      } catch (e) { /* server went away */ }
    }, 1000);
  })();
</script>
</body>
</html>
"""
EDIT_HTML = r"""<!doctype html>
<html lang="en" data-bs-theme="dark">
<head>
  <meta charset="utf-8">
  <title>{{ 'Edit Game' if game else 'Add Game' }} — {{ app_title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css" rel="stylesheet">
</head>
<body>
<nav class="navbar navbar-expand-lg bg-body-tertiary px-3">
  <a class="navbar-brand" href="{{ url_for('gamespace.index') }}">{{ app_title }}</a>
</nav>

<div class="container py-4">
  {% with messages = get_flashed_messages() %}
    {% if messages %}
      <div class="alert alert-warning">{{ messages|join('. ') }}</div>
    {% endif %}
  {% endwith %}

  <h5 class="mb-3">{{ 'Edit Game' if game else 'Add Game' }}</h5>
  <form class="card p-3" method="post"
        action="{{ url_for('gamespace.edit_game_post', game_id=game.id) if game else url_for('gamespace.add_game_post') }}">
    <div class="mb-3">
      <label class="form-label">Name:</label>
      <input class="form-control" type="text" name="name" value="{{ form.name }}">
    </div>
    <div class="mb-3">
      <label class="form-label">Executable path:</label>
      <input class="form-control" type="text" name="path" value="{{ form.path }}">
    </div>
    <div class="mb-3">
      <label class="form-label">Arguments (optional):</label>
      <input class="form-control" type="text" name="args" value="{{ form.args }}">
      <div class="form-text">Separated by spaces. Quotes are not interpreted.</div>
    </div>
    <div class="d-flex gap-2">
      <button class="btn btn-primary" type="submit" name="action" value="ok">OK</button>
      <button class="btn btn-secondary" type="submit" name="action" value="cancel">Cancel</button>
    </div>
  </form>
</div>
</body>
</html>
"""
