import pytest

import jobs.joke_session as cli
from jokebox.schemas import SingleJoke


JOKE = SingleJoke(id=3, joke="a joke about cats", category="Misc")


class FakeFetcher:
    def __init__(self, cache, **kwargs):
        self.cache = cache

    def fetch_joke(self, term):
        self.cache.put("search:" + term, {"id": JOKE.id})
        return JOKE

    def fetch_from_categories(self, categories):
        return JOKE


@pytest.fixture
def fake_fetcher(monkeypatch):
    monkeypatch.setattr(cli, "JokeFetcher", FakeFetcher)


def scripted(answers):
    queue = list(answers)
    return lambda prompt: queue.pop(0)


def test_run_writes_ratings_report_and_cache(tmp_path, fake_fetcher):
    said: list[str] = []
    code = cli.main(["--data-dir", str(tmp_path)], ask=scripted(["cats", "y", "n", "n"]), say=said.append)

    assert code == 0
    assert (tmp_path / "jokes.json").exists()
    assert (tmp_path / "user_report.json").exists()
    assert (tmp_path / "cache.json").exists()


def test_no_cache_skips_cache_file(tmp_path, fake_fetcher):
    code = cli.main(["--data-dir", str(tmp_path), "--no-cache"], ask=scripted(["cats", "y", "n", "n"]), say=lambda s: None)
    assert code == 0
    assert not (tmp_path / "cache.json").exists()


def test_corrupt_ratings_file_exits_1(tmp_path, fake_fetcher, capsys):
    (tmp_path / "jokes.json").write_text("[oops", encoding="utf-8")
    code = cli.main(["--data-dir", str(tmp_path)], ask=scripted(["cats", "y"]), say=lambda s: None)

    assert code == 1
    assert "ERROR" in capsys.readouterr().err


def test_eof_exits_130_and_flushes_cache(tmp_path, fake_fetcher):
    answers = iter(["cats"])

    def ask(prompt):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError

    code = cli.main(["--data-dir", str(tmp_path)], ask=ask, say=lambda s: None)
    assert code == 130
    assert (tmp_path / "cache.json").exists()


def test_threshold_out_of_range_is_rejected(tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--data-dir", str(tmp_path), "--threshold", "2"])
    assert exc_info.value.code == 2
