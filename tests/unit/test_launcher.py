import main


class TestLauncher:
    def test_http_runs_app_by_import_string(self, monkeypatch):
        calls = []
        monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

        main.run_http()

        app, kwargs = calls[0]
        assert app == "app.main:app"
        assert kwargs["port"] == 9106
        assert not hasattr(main, "app")

    def test_https_uses_certificates(self, monkeypatch):
        calls = []
        monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

        main.run_https()

        _, kwargs = calls[0]
        assert kwargs["port"] == 9105
        assert kwargs["ssl_certfile"] == "cert.pem"
