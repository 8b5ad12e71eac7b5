from flask import Flask

from twitterclone.modules.auth.routes import bp as auth_bp
from twitterclone.modules.tweets.routes import bp as tweets_bp
from twitterclone.modules.follows.routes import bp as follows_bp
from twitterclone.modules.notifications.routes import bp as notifications_bp


def register_api_blueprints(app: Flask) -> None:
    app.register_blueprint(auth_bp)
    app.register_blueprint(tweets_bp)
    app.register_blueprint(follows_bp)
    app.register_blueprint(notifications_bp)

    # Root API document
    @app.get("/")
    def api_index():
        return {
            "name": "Twitter Clone API",
            "version": "0.1.0",
            "endpoints": {
                "auth": ["/register", "/login", "/logout", "/profile"],
                "tweets": [
                    "/user/tweets/feed/",
                    "/user/tweets/",
                    "/user/tweets/likes/",
                    "/user/tweets/replies/",
                    "/tweets/<id>/",
                    "/tweets/<id>/likes/",
                    "/tweets/<id>/replies/",
                    "/tweets/<id>/like",
                    "/tweets/<id>/reply",
                ],
                "follows": [
                    "/follow/<id>",
                    "/unfollow/<id>",
                    "/following",
                    "/followers",
                    "/user/following/",
                    "/user/followers/",
                    "/suggestions",
                ],
                "notifications": ["/notifications/", "/notifications/<id>/read"],
            },
        }, 200
