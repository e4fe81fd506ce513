"""Browser host: serves one rendered frame per request as PNG."""

from __future__ import annotations

import io
import logging
import threading
import webbrowser

from flask import Flask, jsonify, render_template_string, request, send_file

from ripplepool.core.errors import InvalidConfiguration
from ripplepool.core.scene import SceneConfig, SceneDirector

logger = logging.getLogger(__name__)

# largest canvas a client may ask for
MAX_CANVAS = (3840, 2160)

HTML_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Pool Sketch</title>
    <style>
        * { box-sizing: border-box; margin: 0; padding: 0; }
        html, body { width: 100%; height: 100%; overflow: hidden; background: #0b0b0b; }
        #frame { display: block; width: 100vw; height: 100vh; }
    </style>
</head>
<body>
    <img id="frame" alt="pool sketch">
    <script>
        const img = document.getElementById('frame');
        let resizeTimer = null;

        function nextFrame() {
            img.src = '/frame.png?t=' + Date.now();
        }

        function sendSize() {
            return fetch('/resize', {
                method: 'POST',
                headers: {'Content-Type': 'application/json'},
                body: JSON.stringify({width: window.innerWidth, height: window.innerHeight})
            });
        }

        img.onload = () => requestAnimationFrame(nextFrame);
        img.onerror = () => setTimeout(nextFrame, 500);
        window.addEventListener('resize', () => {
            clearTimeout(resizeTimer);
            resizeTimer = setTimeout(sendSize, 200);
        });
        sendSize().then(nextFrame);
    </script>
</body>
</html>
"""


def create_app(config: SceneConfig | None = None, max_size: tuple[int, int] = MAX_CANVAS) -> Flask:
    app = Flask(__name__)
    scene = SceneDirector(config)
    # one tick at a time even with a threaded server
    lock = threading.Lock()
    app.config['SCENE'] = scene
    app.config['MAX_CANVAS'] = tuple(max_size)

    @app.route('/')
    def index():
        return render_template_string(HTML_TEMPLATE)

    @app.route('/frame.png')
    def frame():
        try:
            with lock:
                scene.on_tick()
                img = scene.frame_image()
            buf = io.BytesIO()
            img.save(buf, format='PNG')
            buf.seek(0)
            return send_file(buf, mimetype='image/png')
        except Exception as e:
            logger.exception("frame render failed")
            return jsonify({'success': False, 'error': str(e)}), 500

    @app.route('/resize', methods=['POST'])
    def resize():
        data = request.get_json(silent=True) or {}
        try:
            width = int(data['width'])
            height = int(data['height'])
            max_w, max_h = app.config['MAX_CANVAS']
            if width > max_w or height > max_h:
                raise InvalidConfiguration(f"canvas {width}x{height} exceeds the {max_w}x{max_h} limit")
            with lock:
                if (width, height) != (scene.width, scene.height):
                    scene.on_resize(width, height)
            return jsonify({'success': True, 'width': scene.width, 'height': scene.height})
        except (KeyError, TypeError, ValueError, InvalidConfiguration) as e:
            return jsonify({'success': False, 'error': str(e)}), 400

    @app.route('/state')
    def state():
        with lock:
            return jsonify({
                'frame': scene.frame,
                'width': scene.width,
                'height': scene.height,
                'rings': [
                    {'position': list(r.position), 'base': list(r.get_position())}
                    for r in scene.rings
                ],
                'skipped': scene.layout.skipped,
            })

    return app


def open_browser(port: int) -> None:
    webbrowser.open(f'http://localhost:{port}')


def main(config: SceneConfig | None = None, port: int = 5000, open_page: bool = True) -> None:
    app = create_app(config)
    if open_page:
        threading.Timer(1.5, open_browser, args=(port,)).start()
    logger.info("serving on http://localhost:%d", port)
    app.run(debug=False, port=port, threaded=True)
