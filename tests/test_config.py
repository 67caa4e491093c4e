from nextcal.config import load_config


def test_config_defaults_when_keys_missing(tmp_path):
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("ics_url: 'https://example.com/cal.ics'\n", encoding="utf-8")

    cfg = load_config(str(cfg_path))

    assert cfg.ics_url == "https://example.com/cal.ics"
    assert cfg.refresh_interval_secs == 300.0
    assert cfg.use_12h_time is True
    assert cfg.event_limit == 20
    assert cfg.display.width == 50
    assert cfg.display.group_by_day is False


def test_config_missing_file_uses_defaults(tmp_path):
    cfg = load_config(str(tmp_path / "nope.yaml"))

    assert cfg.ics_url == ""
    assert cfg.display.days == 7


def test_time_format_24_selects_24h_clock(tmp_path):
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("time_format: 24\n", encoding="utf-8")

    assert load_config(str(cfg_path)).use_12h_time is False

    cfg_path.write_text("time_format: '24'\n", encoding="utf-8")

    assert load_config(str(cfg_path)).use_12h_time is False


def test_other_time_formats_select_12h_clock(tmp_path):
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text("time_format: '12'\n", encoding="utf-8")

    assert load_config(str(cfg_path)).use_12h_time is True


def test_config_reads_custom_values(tmp_path):
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text(
        """
        ics_url: 'file:///tmp/cal.ics'
        refresh_interval: 60
        event_limit: 5
        fetch_timeout: 3
        display:
          width: 30
          max_rows: 8
          group_by_day: true
          days: 3
        """,
        encoding="utf-8",
    )

    cfg = load_config(str(cfg_path))

    assert cfg.refresh_interval_secs == 60.0
    assert cfg.event_limit == 5
    assert cfg.fetch_timeout_secs == 3.0
    assert cfg.display.width == 30
    assert cfg.display.max_rows == 8
    assert cfg.display.group_by_day is True
    assert cfg.display.days == 3
