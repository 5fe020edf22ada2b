"""
Onboarding wizard routes

One GET/POST pair serves every step: GET renders the step pre-filled from the
stored profile, POST saves it and moves to the next step. Steps with list
editors (inspirations, knowledge) post extra actions that stay on the page.
"""

from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

from flask import abort, flash, jsonify, redirect, request, session
from markupsafe import escape

from .. import config
from ..auth import api_login_required
from ..core.logging_config import get_logger
from ..errors import ProfileNotFoundError, StorageError, ValidationError
from ..knowledge import file_kind, format_file_size
from ..layout import (
    render_checkbox_options,
    render_onboarding_template,
    render_radio_options,
    render_select_options,
    render_template_with_header,
)
from ..profiles import mask_whatsapp_number
from . import catalog, steps
from .linkedin_parser import get_linkedin_display_info, parse_linkedin_input

logger = get_logger(__name__)


def step_url(slug: str) -> str:
    return f"/onboarding/{slug}"


def build_whatsapp_link(number: str = None, message: str = catalog.WHATSAPP_CONNECT_MESSAGE) -> str:
    """wa.me deep link that opens a chat with the Pacelane number"""
    number = number or config.PACELANE_WHATSAPP_NUMBER
    digits = ''.join(ch for ch in number if ch.isdigit())
    return f"https://wa.me/{digits}?text={quote(message)}"


def split_entries(text: Optional[str]) -> List[str]:
    """One entry per line or comma"""
    entries = []
    for line in (text or '').replace(',', '\n').splitlines():
        line = line.strip()
        if line:
            entries.append(line)
    return entries


def needs_linkedin_scrape(profile: Dict[str, Any]) -> bool:
    """True when the stored LinkedIn data is missing or belongs to another username"""
    if not profile.get('linkedin_profile'):
        return False
    if not profile.get('linkedin_scraped_at') or not profile.get('linkedin_data'):
        return True

    scraped_url = (profile.get('linkedin_data') or {}).get('profile_url') or ''
    scraped_username = parse_linkedin_input(scraped_url).username
    return scraped_username.lower() != (profile.get('linkedin_username') or '').lower()


# ============================================================================
# STEP CONTENT
# ============================================================================

def render_welcome_step(first_name: Optional[str]) -> str:
    greeting = f"Hi {escape(first_name)}!" if first_name else "Hi there!"
    upcoming = ''.join(
        f'<li>{escape(step.progress_label)}</li>' for step in steps.STEPS[1:-1]
    )
    return f'''
    <div class="card">
        <h2 style="margin-top: 0;">{greeting}</h2>
        <p>We will ask about your LinkedIn presence, your goals and the way you like to write.
        It takes about five minutes and you can change everything later.</p>
        <p class="muted">What we will cover:</p>
        <ol class="muted">{upcoming}</ol>
    </div>
    '''


def render_linkedin_step(profile: Dict[str, Any]) -> str:
    current = profile.get('linkedin_profile') or ''
    return f'''
    <div class="form-group">
        <label for="linkedin_profile">LinkedIn profile</label>
        <input type="text" id="linkedin_profile" name="linkedin_profile" value="{escape(current)}"
               placeholder="https://www.linkedin.com/in/your-name or your-name" autocomplete="off">
        <div class="help-text" id="linkedin-feedback">Paste your profile URL or just your username.</div>
    </div>
    <script>
        (function() {{
            var input = document.getElementById('linkedin_profile');
            var feedback = document.getElementById('linkedin-feedback');
            input.addEventListener('input', function() {{
                if (!input.value.trim()) {{
                    feedback.textContent = 'Paste your profile URL or just your username.';
                    return;
                }}
                fetch('/api/linkedin/parse?input=' + encodeURIComponent(input.value))
                    .then(function(response) {{ return response.json(); }})
                    .then(function(info) {{
                        feedback.textContent = info.is_valid
                            ? info.display_text
                            : 'This does not look like a LinkedIn profile yet.';
                    }});
            }});
        }})();
    </script>
    '''


def render_whatsapp_step(profile: Dict[str, Any], whatsapp_link: str) -> str:
    stored = profile.get('whatsapp_number')
    current_html = (
        f'<p class="muted">Current number: {escape(mask_whatsapp_number(stored))}. '
        'Leave the field empty to keep it.</p>'
        if stored else ''
    )
    dial_options = ''.join(
        f'<option value="{escape(code)}" {"selected" if code == catalog.DEFAULT_DIAL_CODE else ""}>{escape(label)}</option>'
        for code, label in catalog.DIAL_CODES
    )
    return f'''
    {current_html}
    <div class="form-group">
        <label for="dial_code">Country</label>
        <select id="dial_code" name="dial_code">{dial_options}</select>
    </div>
    <div class="form-group">
        <label for="whatsapp_number">WhatsApp number</label>
        <input type="tel" id="whatsapp_number" name="whatsapp_number" placeholder="(11) 98765-4321">
        <div class="help-text">Numbers typed with a leading + ignore the country above.</div>
    </div>
    <div class="card">
        <p style="margin-top: 0;">Then say hi to us so we can message you:</p>
        <a href="{escape(whatsapp_link)}" target="_blank" rel="noopener" class="btn btn-secondary">
            Sync WhatsApp
        </a>
    </div>
    '''


def render_profile_review_step(profile: Dict[str, Any], summary: Dict[str, Any]) -> str:
    skills = summary.get('skills') or []
    skills_html = (
        f'<p class="muted">Top skills: {escape(", ".join(skills))}</p>' if skills else ''
    )
    linkedin_html = (
        f'<p class="muted">From <a href="{escape(profile["linkedin_profile"])}" target="_blank" rel="noopener">'
        f'{escape(profile["linkedin_profile"])}</a></p>'
        if profile.get('linkedin_profile') else
        f'<p class="muted">No LinkedIn profile yet. <a href="{step_url("first-things-first")}">Add it</a> '
        'or fill in the details yourself.</p>'
    )
    return f'''
    {linkedin_html}
    <div class="form-group">
        <label for="linkedin_name">Name</label>
        <input type="text" id="linkedin_name" name="linkedin_name" value="{escape(profile.get('linkedin_name') or '')}">
    </div>
    <div class="form-group">
        <label for="linkedin_headline">Headline</label>
        <input type="text" id="linkedin_headline" name="linkedin_headline" value="{escape(profile.get('linkedin_headline') or '')}">
    </div>
    <div class="form-group">
        <label for="linkedin_company">Company</label>
        <input type="text" id="linkedin_company" name="linkedin_company" value="{escape(profile.get('linkedin_company') or '')}">
    </div>
    <div class="form-group">
        <label for="linkedin_about">About</label>
        <textarea id="linkedin_about" name="linkedin_about" rows="6">{escape(profile.get('linkedin_about') or '')}</textarea>
    </div>
    {skills_html}
    '''


def render_inspirations_step(inspirations: List[Dict[str, Any]]) -> str:
    if inspirations:
        rows = ''
        for item in inspirations:
            title = item.get('name') or item.get('linkedin_url')
            subtitle = ' · '.join(part for part in (item.get('headline'), item.get('company')) if part)
            rows += f'''
            <li>
                <div>
                    <strong>{escape(title)}</strong>
                    <div class="muted">{escape(subtitle)}</div>
                </div>
                <button type="submit" name="remove_id" value="{item['id']}" class="btn btn-link" formnovalidate>Remove</button>
            </li>
            '''
        list_html = f'<ul class="item-list">{rows}</ul>'
    else:
        list_html = '<p class="muted">No inspirations yet. This step is optional.</p>'

    return f'''
    <div class="form-group">
        <label for="inspiration_url">LinkedIn profile URL</label>
        <input type="text" id="inspiration_url" name="inspiration_url" placeholder="https://www.linkedin.com/in/someone">
    </div>
    <button type="submit" name="action" value="add" class="btn btn-secondary">Add inspiration</button>
    {list_html}
    '''


def render_pacing_step(profile: Dict[str, Any]) -> str:
    pacing = {**catalog.PACING_DEFAULTS, **(profile.get('pacing_preferences') or {})}
    return f'''
    <div class="form-group">
        <label>How much do you want to publish?</label>
        {render_radio_options('intensity', [(o, o) for o in catalog.INTENSITY_OPTIONS], pacing['intensity'])}
    </div>
    <div class="form-group">
        <label>Which days?</label>
        <div class="choice-grid">
            {render_checkbox_options('frequency', catalog.DAYS_OF_WEEK, pacing['frequency'])}
        </div>
    </div>
    <div class="form-group">
        <label for="daily_summary_time">Daily summary</label>
        <select id="daily_summary_time" name="daily_summary_time">
            {render_select_options(catalog.DAILY_SUMMARY_TIMES, pacing['daily_summary_time'])}
        </select>
    </div>
    <div class="form-group">
        <label for="followups_frequency">Follow-ups</label>
        <select id="followups_frequency" name="followups_frequency">
            {render_select_options(catalog.FOLLOWUP_FREQUENCIES, pacing['followups_frequency'])}
        </select>
    </div>
    <div class="form-group">
        <label for="recommendations_time">Content recommendations</label>
        <select id="recommendations_time" name="recommendations_time">
            {render_select_options(catalog.RECOMMENDATION_TIMES, pacing['recommendations_time'])}
        </select>
    </div>
    <div class="form-group">
        <label for="context_sessions_time">Context sessions</label>
        <select id="context_sessions_time" name="context_sessions_time">
            {render_select_options(catalog.CONTEXT_SESSION_TIMES, pacing['context_sessions_time'])}
        </select>
    </div>
    '''


def render_goals_step(profile: Dict[str, Any]) -> str:
    goals = profile.get('goals') or []
    audiences = '\n'.join(profile.get('target_audiences') or [])
    return f'''
    <div class="form-group">
        <label>Goals</label>
        <div class="choice-grid">
            {render_checkbox_options('goals', [(g, g) for g in catalog.GOAL_OPTIONS], goals)}
        </div>
        <div class="help-text">{escape(catalog.get_goal_preview_text(goals))}</div>
    </div>
    <div class="form-group">
        <label for="target_audiences">Who do you want to reach?</label>
        <textarea id="target_audiences" name="target_audiences" rows="3"
                  placeholder="Founders, Product managers, ...">{escape(audiences)}</textarea>
        <div class="help-text">One audience per line or separated by commas.</div>
    </div>
    '''


def render_guides_step(profile: Dict[str, Any]) -> str:
    stored = (profile.get('content_guides') or {}).get('guides')
    guides = stored or catalog.get_guides_for_goals(profile.get('goals'))
    note = '' if stored else '<p class="muted">Suggested from your goals. Edit freely.</p>'
    return f'''
    {note}
    <div class="form-group">
        <label for="guides">Guides</label>
        <textarea id="guides" name="guides" rows="8">{escape(chr(10).join(guides))}</textarea>
        <div class="help-text">One guide per line.</div>
    </div>
    '''


def render_pillars_step(profile: Dict[str, Any]) -> str:
    stored = profile.get('content_pillars') or []
    suggested = catalog.get_pillars_for_goals(profile.get('goals'))
    known = set(suggested) | set(catalog.CONTENT_TYPE_OPTIONS)
    themes = [pillar for pillar in stored if pillar not in known]
    # First visit pre-selects the suggestions
    selected = stored or suggested

    return f'''
    <div class="form-group">
        <label for="themes">Your themes</label>
        <input type="text" id="themes" name="themes" value="{escape(', '.join(themes))}"
               placeholder="AI in healthcare, Remote teams">
        <div class="help-text">Topics you want to be known for, separated by commas.</div>
    </div>
    <div class="form-group">
        <label>Suggested for your goals</label>
        <div class="choice-grid">
            {render_checkbox_options('content_types', [(p, p) for p in suggested], selected, id_prefix='suggested')}
        </div>
    </div>
    <div class="form-group">
        <label>Content types</label>
        <div class="choice-grid">
            {render_checkbox_options('content_types', [(c, c) for c in catalog.CONTENT_TYPE_OPTIONS if c not in suggested], selected, id_prefix='content_type')}
        </div>
    </div>
    '''


def render_writing_format_step(profile: Dict[str, Any]) -> str:
    current = (profile.get('content_guides') or {}).get('writing_format') or catalog.DEFAULT_WRITING_FORMAT
    cards = ''
    for key, writing_format in catalog.WRITING_FORMATS.items():
        checked = 'checked' if key == current else ''
        cards += f'''
        <label class="card" style="display: block; cursor: pointer;">
            <input type="radio" name="writing_format" value="{key}" {checked}>
            <strong>{escape(writing_format['label'])}</strong>
            <span class="muted"> {escape(writing_format['description'])}</span>
            <pre style="white-space: pre-wrap; font-family: inherit;">{escape(writing_format['sample'])}</pre>
        </label>
        '''
    return cards


def render_knowledge_step(items: List[Dict[str, Any]]) -> str:
    if items:
        rows = ''
        for item in items:
            rows += f'''
            <li>
                <div>
                    <strong>{escape(item['name'])}</strong>
                    <div class="muted">{escape(file_kind(item['name'], item['type']))} · {escape(format_file_size(item.get('size')))}</div>
                </div>
                <button type="submit" name="remove_id" value="{item['id']}" class="btn btn-link" formnovalidate>Remove</button>
            </li>
            '''
        list_html = f'<ul class="item-list">{rows}</ul>'
    else:
        list_html = '<p class="muted">Nothing added yet. This step is optional.</p>'

    return f'''
    <div class="form-group">
        <label for="files">Upload files</label>
        <input type="file" id="files" name="files" multiple>
        <div class="help-text">Documents, images, audio or video. Up to 10MB per file, 25MB for audio and video.</div>
    </div>
    <button type="submit" name="action" value="upload" class="btn btn-secondary">Upload</button>
    <div class="form-group" style="margin-top: 1.5rem;">
        <label for="link_url">Or add a link</label>
        <input type="text" id="link_url" name="link_url" placeholder="yourblog.com/post">
    </div>
    <button type="submit" name="action" value="link" class="btn btn-secondary">Add link</button>
    {list_html}
    '''


def render_ready_step(profile: Dict[str, Any], inspiration_count: int, knowledge_count: int) -> str:
    content_guides = profile.get('content_guides') or {}
    writing_format = catalog.WRITING_FORMATS.get(
        content_guides.get('writing_format') or catalog.DEFAULT_WRITING_FORMAT, {}
    ).get('label', '')
    pacing = profile.get('pacing_preferences') or {}

    summary = [
        ('LinkedIn', profile.get('linkedin_name') or profile.get('linkedin_profile') or 'Not set'),
        ('Pace', pacing.get('intensity') or 'Not set'),
        ('Goals', ', '.join(profile.get('goals') or []) or 'Not set'),
        ('Pillars', ', '.join(profile.get('content_pillars') or []) or 'Not set'),
        ('Writing format', writing_format),
        ('Inspirations', str(inspiration_count)),
        ('Knowledge items', str(knowledge_count)),
    ]
    rows = ''.join(
        f'<li><span class="muted">{escape(label)}</span><span>{escape(value)}</span></li>'
        for label, value in summary
    )
    return f'<ul class="item-list">{rows}</ul>'


# ============================================================================
# ROUTES
# ============================================================================

def add_onboarding_routes(app, login_required, profile_store, inspiration_store, knowledge_base,
                          scraper, queue_suggestions: Callable[[int], Any]):

    def load_profile(user_id: int) -> Dict[str, Any]:
        try:
            return profile_store.get_profile(user_id)
        except ProfileNotFoundError:
            profile_store.ensure_profile(user_id)
            return profile_store.get_profile(user_id)

    # ------------------------------------------------------------------
    # GET renderers
    # ------------------------------------------------------------------

    def profile_review_content(user_id: int, profile: Dict[str, Any]) -> str:
        if needs_linkedin_scrape(profile):
            scraped = scraper.scrape_profile(profile['linkedin_profile'])
            if scraped.get('error'):
                logger.warning(f"LinkedIn scrape failed for user {user_id}: {scraped['error']}")
                flash("We couldn't load your LinkedIn profile. Fill in the details below.", 'warning')
            else:
                profile = profile_store.save_linkedin_data(user_id, scraped)
        return render_profile_review_step(profile, scraper.summarize(profile.get('linkedin_data')))

    renderers = {
        'welcome': lambda user_id, profile: render_welcome_step(session.get('user_name')),
        'first-things-first': lambda user_id, profile: render_linkedin_step(profile),
        'whatsapp': lambda user_id, profile: render_whatsapp_step(profile, build_whatsapp_link()),
        'profile-review': profile_review_content,
        'inspirations': lambda user_id, profile: render_inspirations_step(
            inspiration_store.list_inspirations(user_id)),
        'pacing': lambda user_id, profile: render_pacing_step(profile),
        'goals': lambda user_id, profile: render_goals_step(profile),
        'guides': lambda user_id, profile: render_guides_step(profile),
        'pillars': lambda user_id, profile: render_pillars_step(profile),
        'writing-format': lambda user_id, profile: render_writing_format_step(profile),
        'knowledge': lambda user_id, profile: render_knowledge_step(knowledge_base.list_files(user_id)),
        'ready': lambda user_id, profile: render_ready_step(
            profile,
            len(inspiration_store.list_inspirations(user_id)),
            len(knowledge_base.list_files(user_id))),
    }

    def render_step(user_id: int, slug: str) -> str:
        step = steps.get_step(slug)
        profile = load_profile(user_id)
        step_content = renderers[slug](user_id, profile)

        content = render_onboarding_template(
            step_number=steps.step_number(slug),
            total_steps=len(steps.STEPS),
            step_title=step.title,
            step_description=step.description,
            step_content=step_content,
            is_first_step=steps.previous_step(slug) is None,
            is_last_step=steps.next_step(slug) is None,
            form_action=step_url(slug),
            progress_percent=steps.progress_percent(slug),
            multipart=(slug == 'knowledge'),
        )
        return render_template_with_header(step.title, content, minimal_nav=True)

    # ------------------------------------------------------------------
    # POST handlers: return a redirect target, or None for the next step
    # ------------------------------------------------------------------

    def save_linkedin(user_id: int, action: str) -> Optional[str]:
        profile_store.save_linkedin_profile(user_id, request.form.get('linkedin_profile', ''))
        flash('LinkedIn profile saved', 'success')
        return None

    def save_whatsapp(user_id: int, action: str) -> Optional[str]:
        number = request.form.get('whatsapp_number', '').strip()
        if not number and load_profile(user_id).get('whatsapp_number'):
            return None
        profile_store.save_whatsapp_number(user_id, request.form.get('dial_code', ''), number)
        flash('WhatsApp number saved', 'success')
        return None

    def save_profile_review(user_id: int, action: str) -> Optional[str]:
        profile_store.update_linkedin_summary(
            user_id,
            request.form.get('linkedin_name', ''),
            request.form.get('linkedin_headline', ''),
            request.form.get('linkedin_company', ''),
            request.form.get('linkedin_about', ''),
        )
        flash('Profile details saved', 'success')
        return None

    def save_inspirations(user_id: int, action: str) -> Optional[str]:
        remove_id = request.form.get('remove_id')
        if remove_id:
            if remove_id.isdigit() and inspiration_store.remove_inspiration(user_id, int(remove_id)):
                flash('Inspiration removed', 'success')
            return step_url('inspirations')

        if action == 'add':
            inspiration = inspiration_store.add_inspiration(
                user_id, request.form.get('inspiration_url', ''), scraper)
            if inspiration['scraped']:
                flash(f"Added {inspiration['name'] or inspiration['linkedin_url']}", 'success')
            else:
                flash("Added, but we couldn't load details for this profile", 'warning')
            return step_url('inspirations')

        return None

    def save_pacing(user_id: int, action: str) -> Optional[str]:
        profile_store.save_pacing_preferences(user_id, {
            'intensity': request.form.get('intensity'),
            'frequency': request.form.getlist('frequency'),
            'daily_summary_time': request.form.get('daily_summary_time'),
            'followups_frequency': request.form.get('followups_frequency'),
            'recommendations_time': request.form.get('recommendations_time'),
            'context_sessions_time': request.form.get('context_sessions_time'),
        })
        flash('Pacing preferences saved', 'success')
        return None

    def save_goals(user_id: int, action: str) -> Optional[str]:
        profile_store.save_goals(
            user_id,
            request.form.getlist('goals'),
            split_entries(request.form.get('target_audiences')),
        )
        flash('Goals saved', 'success')
        return None

    def save_guides(user_id: int, action: str) -> Optional[str]:
        guides = [line.strip() for line in request.form.get('guides', '').splitlines()]
        profile_store.save_content_guides(user_id, guides)
        flash('Content guides saved', 'success')
        return None

    def save_pillars(user_id: int, action: str) -> Optional[str]:
        profile_store.save_content_pillars(
            user_id,
            split_entries(request.form.get('themes')),
            request.form.getlist('content_types'),
        )
        flash('Content pillars saved', 'success')
        return None

    def save_writing_format(user_id: int, action: str) -> Optional[str]:
        profile_store.save_writing_format(user_id, request.form.get('writing_format'))
        flash('Writing format saved', 'success')
        return None

    def save_knowledge(user_id: int, action: str) -> Optional[str]:
        remove_id = request.form.get('remove_id')
        if remove_id:
            if remove_id.isdigit() and knowledge_base.remove_file(user_id, int(remove_id)):
                flash('Removed from your knowledge base', 'success')
            return step_url('knowledge')

        if action == 'upload':
            files = [f for f in request.files.getlist('files') if f and f.filename]
            if not files:
                raise ValidationError('Please choose a file to upload', field='files')

            uploaded = 0
            for file_storage in files:
                try:
                    knowledge_base.add_file(user_id, file_storage)
                    uploaded += 1
                except ValidationError as e:
                    flash(f"{file_storage.filename}: {e.message}", 'error')
                except StorageError as e:
                    logger.error(f"Upload failed for user {user_id}: {e}")
                    flash(f"{file_storage.filename}: upload failed, please try again", 'error')

            if uploaded:
                flash(f"Uploaded {uploaded} file{'s' if uploaded != 1 else ''}", 'success')
            return step_url('knowledge')

        if action == 'link':
            knowledge_base.add_link(user_id, request.form.get('link_url', ''))
            flash('Link added', 'success')
            return step_url('knowledge')

        return None

    def finish_onboarding(user_id: int, action: str) -> Optional[str]:
        profile_store.complete_onboarding(user_id)
        queue_suggestions(user_id)
        flash("You're all set! Your first content suggestions are on the way.", 'success')
        return '/dashboard'

    handlers = {
        'welcome': lambda user_id, action: None,
        'first-things-first': save_linkedin,
        'whatsapp': save_whatsapp,
        'profile-review': save_profile_review,
        'inspirations': save_inspirations,
        'pacing': save_pacing,
        'goals': save_goals,
        'guides': save_guides,
        'pillars': save_pillars,
        'writing-format': save_writing_format,
        'knowledge': save_knowledge,
        'ready': finish_onboarding,
    }

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    @app.route('/onboarding')
    @login_required
    def onboarding_start():
        """Redirect to first step of onboarding"""
        return redirect(step_url(steps.FIRST_STEP))

    @app.route('/onboarding/<slug>', methods=['GET'])
    @login_required
    def onboarding_step(slug):
        if slug not in handlers:
            abort(404)
        return render_step(session['user_id'], slug)

    @app.route('/onboarding/<slug>', methods=['POST'])
    @login_required
    def onboarding_save_step(slug):
        if slug not in handlers:
            abort(404)

        user_id = session['user_id']
        action = request.form.get('action', 'next')

        if action == 'previous' and 'remove_id' not in request.form:
            return redirect(step_url(steps.previous_step(slug) or slug))

        try:
            target = handlers[slug](user_id, action)
        except ValidationError as e:
            flash(e.message, 'error')
            return render_step(user_id, slug)
        except Exception:
            logger.error(f"Failed to save onboarding step {slug} for user {user_id}", exc_info=True)
            flash(f"Failed to save {steps.get_step(slug).progress_label.lower()}, please try again", 'error')
            return redirect(step_url(slug))

        return redirect(target or step_url(steps.next_step(slug) or slug))

    @app.route('/api/linkedin/parse')
    @api_login_required
    def parse_linkedin():
        """Live feedback for the LinkedIn input field"""
        return jsonify(get_linkedin_display_info(request.args.get('input', '')))
