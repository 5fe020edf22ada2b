"""
Shared HTML layout for server-rendered pages

Pages are plain f-strings; every value coming from the user or the database
goes through escape() before it is interpolated.
"""

from typing import List, Sequence, Tuple

from flask import get_flashed_messages, session
from markupsafe import escape


def get_base_styles() -> str:
    return '''
    <style>
        @import url("https://api.fontshare.com/v2/css?f[]=satoshi@400,500,600,700&display=swap");

        * { box-sizing: border-box; }

        body {
            font-family: "Satoshi", -apple-system, BlinkMacSystemFont, sans-serif;
            background: #fafafa;
            color: #111;
            margin: 0;
        }

        .header {
            display: flex;
            justify-content: space-between;
            align-items: center;
            padding: 1rem 2rem;
            background: white;
            border-bottom: 1px solid #eee;
        }

        .logo { font-weight: 700; font-size: 1.25rem; text-decoration: none; color: #111; }
        .user-info { display: flex; gap: 0.75rem; align-items: center; }
        .main-content { max-width: 960px; margin: 0 auto; padding: 2rem; }

        .btn {
            display: inline-block;
            padding: 0.65rem 1.25rem;
            border-radius: 10px;
            border: 1px solid #111;
            font-family: inherit;
            font-size: 0.95rem;
            cursor: pointer;
            text-decoration: none;
        }
        .btn-primary { background: #111; color: white; }
        .btn-secondary { background: white; color: #111; }
        .btn-link { border: none; background: none; color: #b00020; padding: 0.25rem 0.5rem; }

        .flash-messages { margin-bottom: 1.5rem; }
        .flash-success, .flash-error, .flash-warning, .flash-info {
            padding: 0.75rem 1rem;
            border-radius: 10px;
            margin-bottom: 0.5rem;
        }
        .flash-success { background: #e6f4ea; color: #1e6b34; }
        .flash-error { background: #fdecea; color: #8a1c1c; }
        .flash-warning { background: #fff6e0; color: #7a5200; }
        .flash-info { background: #e8f0fe; color: #1a4d8f; }

        .form-group { margin-bottom: 1.25rem; }
        .form-group label { display: block; font-weight: 500; margin-bottom: 0.4rem; }
        .form-group input[type=text], .form-group input[type=email], .form-group input[type=password],
        .form-group input[type=tel], .form-group input[type=url], .form-group select, .form-group textarea {
            width: 100%;
            padding: 0.65rem 0.85rem;
            border: 1px solid #ddd;
            border-radius: 10px;
            font-family: inherit;
            font-size: 1rem;
        }
        .help-text { font-size: 0.85rem; color: #666; margin-top: 0.35rem; }

        .choice-item { display: flex; align-items: center; gap: 0.6rem; padding: 0.6rem 0; }
        .choice-grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(220px, 1fr)); gap: 0.25rem 1rem; }
        .card { background: white; border: 1px solid #eee; border-radius: 16px; padding: 1.25rem; margin-bottom: 1rem; }
        .item-list { list-style: none; padding: 0; }
        .item-list li { display: flex; justify-content: space-between; align-items: center; padding: 0.6rem 0; border-bottom: 1px solid #f0f0f0; }
        .muted { color: #666; font-size: 0.9rem; }
    </style>
    '''


def render_flash_messages() -> str:
    """Flashed messages as HTML, one block per message"""
    messages = get_flashed_messages(with_categories=True)
    if not messages:
        return ''

    html = '<div class="flash-messages">'
    for category, message in messages:
        html += f'<div class="flash-{escape(category)}">{escape(message)}</div>'
    html += '</div>'
    return html


def render_template_with_header(title: str, content: str, minimal_nav: bool = False) -> str:
    """Wrap page content with the site header and flash messages"""
    if 'user_id' in session:
        display_name = escape(session.get('user_name') or 'Account')
        if minimal_nav:
            # Onboarding pages only offer logout
            user_nav = f'''
                <div class="user-info">
                    <span>{display_name}</span>
                    <a href="/logout" class="btn btn-secondary">Logout</a>
                </div>
            '''
        else:
            user_nav = f'''
                <div class="user-info">
                    <span>{display_name}</span>
                    <a href="/dashboard" class="btn btn-secondary">Dashboard</a>
                    <a href="/logout" class="btn btn-secondary">Logout</a>
                </div>
            '''
    else:
        user_nav = '''
            <div class="user-info">
                <a href="/login" class="btn btn-secondary">Login</a>
                <a href="/register" class="btn btn-primary">Sign Up</a>
            </div>
        '''

    return f'''<!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>{escape(title)} | Pacelane</title>
        {get_base_styles()}
    </head>
    <body>
        <div class="header">
            <a href="/" class="logo">Pacelane</a>
            {user_nav}
        </div>
        <div class="main-content">
            {render_flash_messages()}
            {content}
        </div>
    </body>
    </html>
    '''


def render_radio_options(name: str, options: Sequence[Tuple[str, str]], selected: str = '') -> str:
    """Render radio button options using choice-item styling"""
    html = ""
    for index, (value, label) in enumerate(options):
        checked = 'checked' if value == selected else ''
        html += f'''
        <div class="choice-item">
            <input type="radio" name="{name}" value="{escape(value)}" {checked} id="{name}_{index}">
            <label class="choice-label" for="{name}_{index}">{escape(label)}</label>
        </div>
        '''
    return html


def render_checkbox_options(name: str, options: Sequence[Tuple[str, str]], selected: List[str] = None,
                            id_prefix: str = None) -> str:
    """Render checkbox options using choice-item styling"""
    selected = selected or []
    id_prefix = id_prefix or name
    html = ""
    for index, (value, label) in enumerate(options):
        checked = 'checked' if value in selected else ''
        html += f'''
        <div class="choice-item">
            <input type="checkbox" name="{name}" value="{escape(value)}" {checked} id="{id_prefix}_{index}">
            <label class="choice-label" for="{id_prefix}_{index}">{escape(label)}</label>
        </div>
        '''
    return html


def render_select_options(options: Sequence[str], selected: str = '') -> str:
    return ''.join(
        f'<option value="{escape(option)}" {"selected" if option == selected else ""}>{escape(option)}</option>'
        for option in options
    )


def render_onboarding_template(step_number: int, total_steps: int, step_title: str, step_description: str,
                               step_content: str, is_first_step: bool, is_last_step: bool,
                               form_action: str, progress_percent: int, multipart: bool = False) -> str:
    """Onboarding page body: progress bar, step header and the step form"""

    prev_button = (
        '<button type="submit" name="action" value="previous" class="btn btn-secondary" formnovalidate>'
        '← Back</button>'
        if not is_first_step else ''
    )

    if is_last_step:
        next_button = '<button type="submit" name="action" value="complete" class="btn btn-primary">Go to dashboard</button>'
    else:
        next_button = '<button type="submit" name="action" value="next" class="btn btn-primary">Continue →</button>'

    enctype = ' enctype="multipart/form-data"' if multipart else ''

    return f'''
    <style>
        .onboarding-container {{ max-width: 640px; margin: 0 auto; }}
        .step-counter {{ font-size: 0.8rem; text-transform: uppercase; letter-spacing: 0.1em; color: #666; }}
        .step-title {{ font-size: 2rem; font-weight: 600; margin: 0.5rem 0; }}
        .step-description {{ font-size: 1.05rem; color: #333; line-height: 1.5; }}
        .progress-bar {{ background: #e5e5e5; border-radius: 8px; height: 6px; overflow: hidden; margin: 1.5rem 0 2rem; }}
        .progress-fill {{ background: #111; height: 100%; width: {progress_percent}%; }}
        .step-actions {{ display: flex; flex-direction: row-reverse; justify-content: space-between; margin-top: 2rem; }}
    </style>
    <div class="onboarding-container">
        <div class="step-counter">Step {step_number} of {total_steps}</div>
        <h1 class="step-title">{escape(step_title)}</h1>
        <p class="step-description">{escape(step_description)}</p>
        <div class="progress-bar"><div class="progress-fill"></div></div>

        <form method="POST" action="{form_action}"{enctype}>
            {step_content}
            <div class="step-actions">
                <div>{next_button}</div>
                <div>{prev_button}</div>
            </div>
        </form>
    </div>
    '''
