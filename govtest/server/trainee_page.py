"""Single-page browser client served at ``/``.

The page keeps no exam state of its own: every action posts to the API and
re-renders from the returned state. While a test is running it polls
``/state`` once a second so the countdown and the automatic submission on
timeout show up without user input.
"""

from govtest.constants.ui_constants import PAGE_TITLE, SUBMIT_CONFIRMATION_PROMPT
from govtest.core.markdown_math_renderer import MATHJAX_SCRIPT_URL

_PAGE_TEMPLATE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>__PAGE_TITLE__</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #f1f5f9; color: #0f172a; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; max-width: 72rem; margin-inline: auto; }
      header h1 { margin: 0; color: #4338ca; }
      .card { background: #fff; border-radius: 1rem; padding: 1.5rem; border: 1px solid #e2e8f0; }
      .hidden { display: none !important; }
      .grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(220px, 1fr)); gap: 0.75rem; }
      .tile { border: 1px solid #e2e8f0; border-radius: 0.75rem; padding: 1rem; background: #fff; cursor: pointer; text-align: left; font-size: 1rem; }
      .tile:hover { border-color: #6366f1; background: #eef2ff; }
      .tile .icon { font-size: 1.75rem; margin-right: 0.5rem; }
      .tile small { display: block; color: #64748b; margin-top: 0.35rem; }
      .primary-button { border: none; border-radius: 0.75rem; padding: 0.75rem 1.25rem; font-size: 1rem; background: #4f46e5; color: #fff; cursor: pointer; }
      .secondary-button { border: 1px solid #cbd5e1; border-radius: 0.75rem; padding: 0.75rem 1.25rem; font-size: 1rem; background: #fff; cursor: pointer; }
      .primary-button:disabled, .secondary-button:disabled { opacity: 0.5; cursor: not-allowed; }
      .notice { background: #fef3c7; border: 1px solid #fcd34d; color: #92400e; padding: 0.75rem 1rem; border-radius: 0.75rem; }
      .test-layout { display: grid; grid-template-columns: 16rem 1fr; gap: 1rem; }
      .timer { font-size: 1.5rem; font-weight: 700; color: #dc2626; }
      .question-map { display: grid; grid-template-columns: repeat(5, 1fr); gap: 0.35rem; margin: 1rem 0; }
      .map-cell { aspect-ratio: 1; border-radius: 0.5rem; border: 1px solid #e2e8f0; background: #fff; cursor: pointer; font-size: 0.8rem; font-weight: 700; }
      .map-cell.answered { background: #4f46e5; color: #fff; }
      .map-cell.current { outline: 2px solid #6366f1; }
      .map-cell.bookmarked { box-shadow: 0 0 0 2px #fbbf24; }
      .option-button { display: flex; gap: 0.75rem; align-items: center; width: 100%; border: 2px solid #e2e8f0; border-radius: 0.75rem; padding: 0.85rem; margin-bottom: 0.5rem; background: #fff; cursor: pointer; font-size: 1rem; text-align: left; }
      .option-button.selected { border-color: #4f46e5; background: #eef2ff; }
      .letter { font-weight: 700; width: 2rem; height: 2rem; border-radius: 0.5rem; background: #f1f5f9; display: flex; align-items: center; justify-content: center; }
      .badge { font-size: 0.75rem; font-weight: 700; padding: 0.2rem 0.6rem; border-radius: 999px; background: #f1f5f9; }
      .row { display: flex; gap: 0.5rem; justify-content: space-between; align-items: center; flex-wrap: wrap; }
      .stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(140px, 1fr)); gap: 0.75rem; }
      .stat { background: #f8fafc; border-radius: 0.75rem; padding: 1rem; text-align: center; }
      .stat strong { display: block; font-size: 1.75rem; }
      .bar-track { background: #e2e8f0; border-radius: 999px; height: 0.6rem; overflow: hidden; }
      .bar-fill { background: #4f46e5; height: 100%; }
      .tips { background: #312e81; color: #fff; }
      .review { border-top: 1px solid #e2e8f0; padding-top: 1rem; margin-top: 1rem; }
      .review .opt { padding: 0.5rem 0.75rem; border-radius: 0.5rem; border: 1px solid #e2e8f0; margin-bottom: 0.35rem; }
      .review .opt.correct { border-color: #10b981; background: #ecfdf5; }
      .review .opt.wrong { border-color: #f43f5e; background: #fff1f2; }
      .spinner { width: 4rem; height: 4rem; border: 0.5rem solid #e0e7ff; border-top-color: #4f46e5; border-radius: 50%; animation: spin 1s linear infinite; margin: 2rem auto; }
      @keyframes spin { to { transform: rotate(360deg); } }
      @media (max-width: 720px) { .test-layout { grid-template-columns: 1fr; } }
    </style>
    <script>
      window.MathJax = { tex: { inlineMath: [['$','$']], displayMath: [['$$','$$']] }, svg: { fontCache: 'global' } };
    </script>
    <script defer src="__MATHJAX_SCRIPT_URL__"></script>
  </head>
  <body>
    <header class="row">
      <h1>GovTest AI</h1>
      <button id="restart-button" class="secondary-button hidden">Restart</button>
    </header>
    <div id="notice" class="notice hidden"></div>

    <section class="card hidden" id="exam-selection">
      <h2>Choose your exam</h2>
      <div id="exam-grid" class="grid"></div>
    </section>

    <section class="card hidden" id="subject-selection">
      <button id="back-button" class="secondary-button">&larr; Back to Exams</button>
      <h2 id="subject-heading"></h2>
      <p>Choose a subject to generate your mock test. Tests typically consist of 40 questions to be completed in 30 minutes.</p>
      <div id="subject-grid" class="grid"></div>
    </section>

    <section class="card hidden" id="loading">
      <div class="spinner"></div>
      <h2 id="loading-message" style="text-align:center"></h2>
      <p style="text-align:center;color:#64748b">This usually takes 10-15 seconds while the questions are tailored to your exam.</p>
    </section>

    <section class="hidden test-layout" id="testing">
      <aside class="card">
        <div class="timer" id="timer"></div>
        <div id="answered-count"></div>
        <div class="question-map" id="question-map"></div>
        <button id="submit-button" class="primary-button" style="width:100%">Submit Test</button>
      </aside>
      <div class="card">
        <div class="row">
          <span><span class="badge" id="question-number"></span> <span class="badge" id="question-difficulty"></span></span>
          <button id="bookmark-button" class="secondary-button"></button>
        </div>
        <div id="question-text"></div>
        <div id="options"></div>
        <div class="row">
          <button id="prev-button" class="secondary-button">Previous</button>
          <button id="clear-button" class="secondary-button">Clear Choice</button>
          <button id="next-button" class="primary-button">Next</button>
        </div>
      </div>
    </section>

    <section class="hidden" id="results">
      <div class="card">
        <div class="row"><h2>Your Performance</h2><button id="new-test-button" class="primary-button">Take New Test</button></div>
        <div class="stats" id="stats"></div>
      </div>
      <div class="card"><h3>Accuracy by Topic</h3><div id="subject-bars"></div></div>
      <div class="card tips"><h3>AI Mentor Tips</h3><div id="tips"></div></div>
      <div class="card"><h3>Review Questions</h3><div id="reviews"></div></div>
    </section>

    <script>
      const CONFIRM_PROMPT = __CONFIRM_PROMPT__;
      const LETTERS = ['A', 'B', 'C', 'D'];
      const sections = ['exam-selection', 'subject-selection', 'loading', 'testing', 'results'];
      const screenToSection = {
        'exam-selection': 'exam-selection',
        'subject-selection': 'subject-selection',
        'generating': 'loading',
        'testing': 'testing',
        'analyzing': 'loading',
        'results': 'results'
      };
      const $ = (id) => document.getElementById(id);
      let catalog = { exams: [], subjects: [] };
      let currentScreen = null;
      let pollHandle = null;
      let confirming = false;

      function setVisibility(element, isVisible) {
        if (!element) return;
        element.classList.toggle('hidden', !isVisible);
      }

      function typeset() {
        if (window.MathJax && window.MathJax.typesetPromise) {
          window.MathJax.typesetPromise().catch((error) => console.error('MathJax error:', error));
        }
      }

      function formatTime(seconds) {
        const mins = Math.floor(seconds / 60);
        const secs = seconds % 60;
        return `${mins}:${secs.toString().padStart(2, '0')}`;
      }

      async function api(method, path, body) {
        const options = { method, headers: { 'Content-Type': 'application/json' } };
        if (body !== undefined) options.body = JSON.stringify(body);
        const response = await fetch(path, options);
        const payload = await response.json().catch(() => ({}));
        if (!response.ok) {
          throw new Error(payload.detail || `Request failed (${response.status})`);
        }
        return payload;
      }

      async function act(method, path, body) {
        try {
          render(await api(method, path, body));
        } catch (error) {
          console.error(error);
          await refresh();
        }
      }

      function tile(icon, title, subtitle, onClick) {
        const button = document.createElement('button');
        button.className = 'tile';
        button.innerHTML = `<span class="icon"></span><strong></strong><small></small>`;
        button.querySelector('.icon').textContent = icon;
        button.querySelector('strong').textContent = title;
        button.querySelector('small').textContent = subtitle || '';
        button.addEventListener('click', onClick);
        return button;
      }

      function renderCatalog() {
        const examGrid = $('exam-grid');
        examGrid.innerHTML = '';
        catalog.exams.forEach((exam) => {
          examGrid.appendChild(tile(exam.icon, exam.name, exam.description, () => act('POST', '/exam', { exam_id: exam.id })));
        });
        const subjectGrid = $('subject-grid');
        subjectGrid.innerHTML = '';
        catalog.subjects.forEach((subject) => {
          subjectGrid.appendChild(tile(subject.icon, subject.name, '', () => {
            setVisibility($('subject-selection'), false);
            setVisibility($('loading'), true);
            $('loading-message').textContent = `Generating ${subject.name} questions...`;
            act('POST', '/subject', { subject_id: subject.id });
          }));
        });
      }

      function renderTest(test) {
        $('timer').textContent = `🕒 ${formatTime(test.remaining_seconds)}`;
        $('answered-count').textContent = `${test.answered_count} of ${test.question_count} answered`;
        const map = $('question-map');
        map.innerHTML = '';
        test.question_map.forEach((cell, index) => {
          const button = document.createElement('button');
          button.className = 'map-cell';
          button.classList.toggle('answered', cell.answered);
          button.classList.toggle('current', cell.current);
          button.classList.toggle('bookmarked', cell.bookmarked);
          button.textContent = cell.number;
          button.addEventListener('click', () => act('POST', '/navigate', { index }));
          map.appendChild(button);
        });
        const question = test.question;
        const questionChanged = $('question-text').dataset.questionId !== String(question.id);
        $('question-number').textContent = `Question ${question.number} of ${test.question_count}`;
        $('question-difficulty').textContent = question.difficulty;
        $('bookmark-button').textContent = test.bookmarked ? '★ Bookmarked' : '☆ Bookmark';
        if (questionChanged) {
          $('question-text').innerHTML = question.question_html;
          $('question-text').dataset.questionId = String(question.id);
        }
        const options = $('options');
        options.innerHTML = '';
        question.options_html.forEach((html, index) => {
          const button = document.createElement('button');
          button.className = 'option-button';
          button.classList.toggle('selected', test.selected_option === index);
          button.innerHTML = `<span class="letter">${LETTERS[index]}</span><span>${html}</span>`;
          button.addEventListener('click', () => act('POST', '/answer', { option_index: index }));
          options.appendChild(button);
        });
        $('prev-button').disabled = test.cursor === 0;
        const isLast = test.cursor === test.question_count - 1;
        $('next-button').textContent = isLast ? 'Finish' : 'Next';
        if (questionChanged) typeset();
        if (test.session_state === 'submitting' && !confirming) {
          confirming = true;
          const confirmed = window.confirm(CONFIRM_PROMPT);
          act('POST', '/submit/confirm', { confirmed }).finally(() => { confirming = false; });
        }
      }

      async function renderResults() {
        const result = await api('GET', '/result');
        const stats = [
          ['Score', `${result.score}/${result.total_questions}`],
          ['Accuracy', `${result.accuracy}%`],
          ['Correct', result.correct_answers],
          ['Incorrect', result.incorrect_answers],
          ['Skipped', result.skipped_answers]
        ];
        $('stats').innerHTML = stats.map(([label, value]) => `<div class="stat"><strong>${value}</strong>${label}</div>`).join('');
        $('subject-bars').innerHTML = result.subject_analysis.map((row) => `
          <div style="margin-bottom:0.75rem">
            <div class="row"><span class="subject-name"></span><span>${row.correct}/${row.total} (${row.accuracy}%)</span></div>
            <div class="bar-track"><div class="bar-fill" style="width:${row.accuracy}%"></div></div>
          </div>`).join('');
        $('subject-bars').querySelectorAll('.subject-name').forEach((el, index) => {
          el.textContent = result.subject_analysis[index].subject;
        });
        $('tips').innerHTML = result.ai_tips_html;
        $('reviews').innerHTML = result.reviews.map((review) => `
          <div class="review">
            <div class="row"><strong>${review.number}.</strong><span class="badge">${review.status}</span></div>
            ${review.question_html}
            ${review.options_html.map((html, index) => {
              let cls = 'opt';
              if (index === review.correct_answer) cls += ' correct';
              else if (index === review.selected_option) cls += ' wrong';
              return `<div class="${cls}"><strong>${LETTERS[index]}.</strong> ${html}</div>`;
            }).join('')}
            <p><strong>Explanation:</strong></p>${review.explanation_html}
          </div>`).join('');
        typeset();
      }

      function render(state) {
        const section = screenToSection[state.screen];
        sections.forEach((id) => setVisibility($(id), id === section));
        setVisibility($('restart-button'), state.screen !== 'exam-selection');
        const notice = $('notice');
        notice.textContent = state.notice || '';
        setVisibility(notice, Boolean(state.notice));
        if (state.exam) {
          $('subject-heading').textContent = `${state.exam.icon} ${state.exam.name} Preparation`;
        }
        if (state.loading_message) {
          $('loading-message').textContent = state.loading_message;
        }
        if (state.screen === 'testing' && state.test) {
          renderTest(state.test);
        }
        if (state.screen === 'results' && currentScreen !== 'results') {
          renderResults().catch((error) => console.error(error));
        }
        const wantsPolling = ['generating', 'testing', 'analyzing'].includes(state.screen);
        if (wantsPolling && !pollHandle) {
          pollHandle = setInterval(refresh, 1000);
        } else if (!wantsPolling && pollHandle) {
          clearInterval(pollHandle);
          pollHandle = null;
        }
        currentScreen = state.screen;
      }

      async function refresh() {
        try {
          render(await api('GET', '/state'));
        } catch (error) {
          console.error('Unable to reach the trainer server:', error);
        }
      }

      $('back-button').addEventListener('click', () => act('POST', '/exam/back'));
      $('restart-button').addEventListener('click', () => act('POST', '/restart'));
      $('new-test-button').addEventListener('click', () => act('POST', '/restart'));
      $('bookmark-button').addEventListener('click', () => act('POST', '/bookmark'));
      $('clear-button').addEventListener('click', () => act('DELETE', '/answer'));
      $('submit-button').addEventListener('click', () => act('POST', '/submit'));
      $('prev-button').addEventListener('click', () => act('POST', '/navigate/previous'));
      $('next-button').addEventListener('click', () => {
        const current = Number($('question-map').querySelector('.current').textContent) - 1;
        const count = $('question-map').children.length;
        if (current < count - 1) act('POST', '/navigate/next');
        else act('POST', '/submit');
      });

      (async () => {
        catalog = await api('GET', '/catalog');
        renderCatalog();
        await refresh();
      })();
    </script>
  </body>
</html>
"""

TRAINEE_PAGE_HTML = (
    _PAGE_TEMPLATE.replace("__PAGE_TITLE__", PAGE_TITLE)
    .replace("__MATHJAX_SCRIPT_URL__", MATHJAX_SCRIPT_URL)
    .replace("__CONFIRM_PROMPT__", '"' + SUBMIT_CONFIRMATION_PROMPT + '"')
)
