from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..container import Container
from ..core.exceptions import AuthenticationError
from .web import SESSION_KEY, install_request_gate


def register(app: Flask, container: Container) -> None:
    install_request_gate(app, container.manager_details)

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")
            try:
                principal = container.manager_details.authenticate(username, password)
            except AuthenticationError:
                flash("Invalid username and password.", "danger")
                return render_template("login.html", username=username), 401

            session.clear()
            session[SESSION_KEY] = principal.name
            return redirect(url_for("index"))

        return render_template("login.html", username="")

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        session.clear()
        flash("You have been logged out.", "info")
        return redirect(url_for("index"))
