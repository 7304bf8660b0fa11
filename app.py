from flask import Flask, current_app, jsonify
from dataclasses import dataclass
from dotenv import load_dotenv
import os, requests

from places import pick_place
from twitch import TwitchAuth, TwitchClient, TwitchError

load_dotenv()

REQUIRED_VARS = ("TWITCH_CLIENT_ID", "TWITCH_CLIENT_SECRET", "TWITCH_CHANNEL")


@dataclass
class Config:
    client_id: str
    client_secret: str
    channel: str
    port: int = 8080
    request_timeout: float = 10


def load_config(environ=None) -> Config:
    """
    Read config from the environment (.env is loaded on import).
    Exits the process with status 1 if a required variable is missing.
    """
    env = os.environ if environ is None else environ
    missing = [k for k in REQUIRED_VARS if not env.get(k)]
    for k in missing:
        print(f"Missing {k} environment variable")
    if missing:
        raise SystemExit(1)
    return Config(
        client_id=env["TWITCH_CLIENT_ID"],
        client_secret=env["TWITCH_CLIENT_SECRET"],
        channel=env["TWITCH_CHANNEL"],
        port=int(env.get("PORT") or "8080"),
        request_timeout=float(env.get("REQUEST_TIMEOUT") or "10"),
    )


def render_status_page(is_live: bool, place: str, channel: str):
    try:
        tmpl = current_app.jinja_env.get_template("index.html")
    except Exception as e:
        print("[StatusPage] error loading template:", e)
        return f"Error loading template: {e}", 500, {"Content-Type": "text/plain; charset=utf-8"}
    try:
        html = tmpl.render(is_live=is_live, place=place, channel=channel)
    except Exception as e:
        print("[StatusPage] error rendering template:", e)
        return f"Error rendering template: {e}", 500, {"Content-Type": "text/plain; charset=utf-8"}
    return html, 200, {"Content-Type": "text/html; charset=utf-8"}


def create_app(config: Config, session=None) -> Flask:
    app = Flask(__name__)
    app.config["TWITCH_CHANNEL"] = config.channel

    auth = TwitchAuth(config.client_id, config.client_secret,
                      session or requests.Session(), timeout=config.request_timeout)
    app.extensions["twitch"] = TwitchClient(auth)

    @app.route('/')
    def home():
        twitch = current_app.extensions["twitch"]
        channel = current_app.config["TWITCH_CHANNEL"]
        try:
            live = twitch.is_channel_live(channel)
        except TwitchError as e:
            print(f"[StatusPage] twitch error for {channel}: {e}")
            return str(e), 401, {"Content-Type": "text/plain; charset=utf-8"}
        return render_status_page(live, pick_place(), channel)

    @app.get('/health')
    def health():
        twitch = current_app.extensions["twitch"]
        tinfo = twitch.auth.snapshot()
        return jsonify({
            "status": "ok",
            "channel": current_app.config["TWITCH_CHANNEL"],
            "token_cached": tinfo["cached"],
            "token_expires_in": tinfo["expires_in"],
        })

    return app


if __name__ == '__main__':
    cfg = load_config()
    create_app(cfg).run(host='0.0.0.0', port=cfg.port)
