"""Single-page template for the console, rendered with ``render_template_string``."""

PAGE = """<!doctype html>
<html>
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>Student Management System</title>
<style>
:root{--bg:#071428;--card:#0b1220;--accent:#06b6d4;--muted:#94a3b8;--danger:#f87171;--ok:#34d399;--warn:#fbbf24}
*{box-sizing:border-box;font-family:Inter,system-ui,Arial}
body{margin:0;background:linear-gradient(180deg,#071428 0%,#0b1220 80%);color:#e6eef6;padding:24px}
.app{max-width:1100px;margin:0 auto}
.header{display:flex;align-items:center;gap:16px;background:linear-gradient(90deg,rgba(255,255,255,0.02),rgba(255,255,255,0.01));padding:16px;border-radius:12px}
.logo{width:56px;height:56px;border-radius:10px;background:linear-gradient(135deg,var(--accent),#7c3aed);display:flex;align-items:center;justify-content:center;font-weight:700}
.title h1{margin:0;font-size:18px}
.card{background:linear-gradient(180deg,rgba(255,255,255,0.02),rgba(255,255,255,0.01));padding:14px;border-radius:12px;box-shadow:0 8px 28px rgba(2,6,23,0.6);margin-top:18px}
.narrow{max-width:420px;margin:18px auto 0}
.btn{background:transparent;border:1px solid rgba(255,255,255,0.06);padding:8px 12px;border-radius:8px;color:inherit;cursor:pointer;text-decoration:none;display:inline-block}
.btn.primary{background:linear-gradient(90deg,var(--accent),#7c3aed);color:#041020;border:0}
.btn.danger{border-color:var(--danger);color:var(--danger)}
.btn:disabled{opacity:.5;cursor:wait}
.form-row{display:flex;flex-direction:column;gap:4px;margin-bottom:10px}
.input,select{background:transparent;border:1px solid rgba(255,255,255,0.06);padding:10px;border-radius:8px;color:inherit}
.input:disabled{opacity:.6}
.field-error{color:var(--danger);font-size:13px}
.hr{height:1px;background:rgba(255,255,255,0.03);margin:12px 0;border-radius:4px}
table{width:100%;border-collapse:collapse}
th,td{text-align:left;padding:8px 6px;border-bottom:1px solid rgba(255,255,255,0.04)}
.right{text-align:right}
.small{font-size:13px;color:var(--muted)}
.toast{padding:10px 12px;border-radius:8px;margin-top:8px;background:rgba(255,255,255,0.03)}
.toast.success{border-left:3px solid var(--ok)}
.toast.danger{border-left:3px solid var(--danger)}
.toast.warning,.toast.info{border-left:3px solid var(--warn)}
.overlay{position:fixed;inset:0;background:rgba(2,6,23,0.75);display:flex;align-items:center;justify-content:center}
.modal{width:425px;max-width:95vw;background:var(--card);padding:18px;border-radius:12px}
.modal h2{margin:0 0 4px;font-size:17px}
.footer{margin-top:14px;color:var(--muted);text-align:center;font-size:13px}
</style>
</head>
<body>
<div class="app">
  <div class="header">
    <div class="logo">SR</div>
    <div class="title"><h1>Student Management System</h1></div>
    <div style="margin-left:auto" class="small">
      {% if auth and auth.user %}
        <strong>{{ auth.user.username }}</strong> ({{ auth.user.role.value }})
        <a class="btn" href="{{ url_for('console.logout') }}">Logout</a>
      {% else %}Not signed in{% endif %}
    </div>
  </div>

  {% for category, message in get_flashed_messages(with_categories=true) %}
    <div class="toast {{ category }}">{{ message }}</div>
  {% endfor %}

  {% macro field(form, name, label, placeholder='', type='text', locked=()) -%}
    <div class="form-row">
      <label for="{{ name }}">{{ label }}</label>
      <input id="{{ name }}" name="{{ name }}" type="{{ type }}" class="input" placeholder="{{ placeholder }}"
             value="{{ form.values.get(name, '') if type != 'password' else '' }}"{% if name in locked %} disabled{% endif %}>
      {% if form.errors.get(name) %}<div class="field-error">{{ form.errors[name] }}</div>{% endif %}
    </div>
  {%- endmacro %}

  {% set busy = "this.querySelectorAll('button[type=submit]').forEach(function(b){b.disabled=true})" %}

  {% if view == "loading" %}
    <div class="card narrow small">Loading...</div>

  {% elif view == "login" %}
    <div class="card narrow">
      <strong>Sign in</strong>
      <div class="hr"></div>
      {% if auth.error %}<div class="field-error">{{ auth.error }}</div>{% endif %}
      <form method="post" action="{{ url_for('console.login') }}" onsubmit="{{ busy }}">
        <input type="hidden" name="next" value="{{ next or '' }}">
        {{ field(form, 'username', 'Username') }}
        {{ field(form, 'password', 'Password', type='password') }}
        <button class="btn primary" type="submit">Login</button>
        <a class="btn" href="{{ url_for('console.register', next=next) if next else url_for('console.register') }}">Create account</a>
      </form>
    </div>

  {% elif view == "register" %}
    <div class="card narrow">
      <strong>Create account</strong>
      <div class="hr"></div>
      {% if auth.error %}<div class="field-error">{{ auth.error }}</div>{% endif %}
      <form method="post" action="{{ url_for('console.register') }}" onsubmit="{{ busy }}">
        <input type="hidden" name="next" value="{{ next or '' }}">
        {{ field(form, 'username', 'Username') }}
        {{ field(form, 'email', 'Email', type='email') }}
        {{ field(form, 'full_name', 'Full name') }}
        <div class="form-row">
          <label for="role">Role</label>
          <select id="role" name="role" class="input">
            {% for r in roles %}<option value="{{ r }}"{% if form.values.get('role', 'user') == r %} selected{% endif %}>{{ r }}</option>{% endfor %}
          </select>
          {% if form.errors.get('role') %}<div class="field-error">{{ form.errors['role'] }}</div>{% endif %}
        </div>
        {{ field(form, 'password', 'Password', type='password') }}
        <button class="btn primary" type="submit">Register</button>
        <a class="btn" href="{{ url_for('console.login') }}">Back to login</a>
      </form>
    </div>

  {% elif view == "unauthorized" %}
    <div class="card narrow">
      <strong>Access denied</strong>
      <div class="hr"></div>
      <div class="small">Your account does not have permission to open that page.</div>
      <div class="hr"></div>
      <a class="btn" href="{{ url_for('console.dashboard') }}">Back to dashboard</a>
    </div>

  {% elif view == "dashboard" %}
    <div class="card">
      <div style="display:flex;justify-content:space-between;align-items:center;gap:8px">
        <form method="get" action="{{ url_for('console.dashboard') }}" style="display:flex;gap:8px">
          <input name="q" class="input" placeholder="Search by name or roll number" value="{{ roster.query }}">
          <button class="btn" type="submit">Search</button>
        </form>
        {% if auth.is_admin %}
          <a class="btn primary" href="{{ url_for('console.dashboard', dialog='add', q=roster.query or None) }}">Add Student</a>
        {% endif %}
      </div>
      <div class="hr"></div>
      {% if roster.state == "error" %}
        <div class="field-error">{{ roster.error }}</div>
      {% elif roster.state == "empty" %}
        <div class="small">No students yet.</div>
      {% elif roster.state == "no_results" %}
        <div class="small">No students match "{{ roster.query }}".</div>
      {% else %}
        <table>
          <thead><tr>
            <th>Name</th><th>Roll Number</th><th>Class</th><th>Grade</th>
            {% if auth.is_admin %}<th class="right">Actions</th>{% endif %}
          </tr></thead>
          <tbody>
          {% for s in roster.visible %}
            <tr>
              <td><strong>{{ s.name }}</strong></td>
              <td>{{ s.roll_number }}</td>
              <td>{{ s.class_name }}</td>
              <td>{{ s.grade }}</td>
              {% if auth.is_admin %}
                <td class="right">
                  <a class="btn" href="{{ url_for('console.dashboard', edit=s.roll_number, q=roster.query or None) }}">Edit</a>
                  <form method="post" action="{{ url_for('console.stage_delete', roll_number=s.roll_number) }}" style="display:inline">
                    <input type="hidden" name="name" value="{{ s.name }}">
                    <input type="hidden" name="q" value="{{ roster.query }}">
                    <button class="btn danger" type="submit">Delete</button>
                  </form>
                </td>
              {% endif %}
            </tr>
          {% endfor %}
          </tbody>
        </table>
      {% endif %}
    </div>

    {% if dialog and dialog.is_open %}
      <div class="overlay">
        <div class="modal">
          {% if dialog.mode == "add" %}
            <h2>Add New Student</h2>
            <div class="small">Fill in the details below to add a new student to the system.</div>
            {% set action = url_for('console.create_student') %}
          {% else %}
            <h2>Edit Student</h2>
            <div class="small">Update the student details below.</div>
            {% set action = url_for('console.update_student', roll_number=dialog.editing.roll_number) %}
          {% endif %}
          <div class="hr"></div>
          <form method="post" action="{{ action }}" onsubmit="{{ busy }}">
            <input type="hidden" name="q" value="{{ roster.query }}">
            {{ field(dialog.form, 'name', 'Name', 'John Doe') }}
            {{ field(dialog.form, 'roll_number', 'Roll Number', 'e.g., 2023001', locked=dialog.locked) }}
            {{ field(dialog.form, 'class_name', 'Class', 'e.g., 10A') }}
            <div class="form-row">
              <label for="grade">Grade</label>
              <select id="grade" name="grade" class="input">
                <option value="">Select a grade</option>
                {% for g in grades %}<option value="{{ g }}"{% if dialog.form.values.get('grade') == g %} selected{% endif %}>{{ g }}</option>{% endfor %}
              </select>
              {% if dialog.form.errors.get('grade') %}<div class="field-error">{{ dialog.form.errors['grade'] }}</div>{% endif %}
            </div>
            <div class="hr"></div>
            <a class="btn" href="{{ url_for('console.dashboard', q=roster.query or None) }}">Cancel</a>
            <button class="btn primary" type="submit">{{ 'Add Student' if dialog.mode == 'add' else 'Update Student' }}</button>
          </form>
        </div>
      </div>
    {% endif %}

    {% if pending %}
      <div class="overlay">
        <div class="modal">
          <h2>Delete Student</h2>
          <div class="small">Delete {{ pending.name }} ({{ pending.roll_number }})? This cannot be undone.</div>
          <div class="hr"></div>
          <form method="post" action="{{ url_for('console.cancel_delete') }}" style="display:inline">
            <button class="btn" type="submit">Cancel</button>
          </form>
          <form method="post" action="{{ url_for('console.confirm_delete') }}" style="display:inline" onsubmit="{{ busy }}">
            <button class="btn danger" type="submit">Delete</button>
          </form>
        </div>
      </div>
    {% endif %}
  {% endif %}

  <div class="footer"><div class="small">Server time: {{ now }}</div></div>
</div>
</body>
</html>
"""
