# jokebox/session.py
"""
Interactive joke session.

Reads answers only through the injected `ask` callable and writes only through `say`,
so the loop can be driven by stdin/stdout or by a script in tests.
"""
from __future__ import annotations

from typing import Callable

from jokebox.errors import JokeNotFoundError, NetworkError, ParseError, RemoteError
from jokebox.logging_utils import log_event
from jokebox.rating_store import RatingStore
from jokebox.recommend import recommend
from jokebox.report import ReportAggregator, render_report
from jokebox.schemas import SingleJoke, TwoPartJoke, UserReport, with_rating
from jokebox.similarity import SIMILARITY_THRESHOLD


SEARCH_PROMPT = "What word would you like to search for? "
RATE_PROMPT = "Did you like the joke? (y/n) "
MORE_PROMPT = "Would you like to see more jokes? (y/n) "
CLEAR_PROMPT = "Would you like to clear your data and start over? (y/n) "
INVALID_YN = "invalid input, please use either y or n"

FETCH_ERRORS = (NetworkError, RemoteError)


class JokeSession:
    def __init__(
        self,
        fetcher,
        store: RatingStore,
        aggregator: ReportAggregator,
        ask: Callable[[str], str],
        say: Callable[[str], None],
        *,
        threshold: float = SIMILARITY_THRESHOLD,
        max_attempts: int = 5,
    ):
        self.fetcher = fetcher
        self.store = store
        self.aggregator = aggregator
        self.ask = ask
        self.say = say
        self.threshold = threshold
        self.max_attempts = max_attempts

    def ask_yes_no(self, prompt: str) -> bool:
        """Re-ask until the answer is y or n."""
        while True:
            answer = self.ask(prompt).strip().lower()
            if answer in ("y", "n"):
                return answer == "y"
            self.say(INVALID_YN)

    def search(self) -> SingleJoke | TwoPartJoke:
        """Prompt for a search word until a joke is found."""
        while True:
            term = self.ask(SEARCH_PROMPT).strip()
            if not term:
                self.say("please enter a word to search for")
                continue
            self.say(f"Searching for jokes containing {term}...")
            try:
                return self.fetcher.fetch_joke(term)
            except JokeNotFoundError:
                self.say("joke not found, search for another term")
            except FETCH_ERRORS as exc:
                self.say(f"could not reach the joke service ({exc}), please try again")
            except ParseError as exc:
                self.say(f"the joke service sent something unreadable ({exc}), please try again")

    def rate(self, joke: SingleJoke | TwoPartJoke) -> SingleJoke | TwoPartJoke:
        """Show `joke`, ask for a rating and save it. Returns the rating record."""
        self.say(joke.text)
        liked = self.ask_yes_no(RATE_PROMPT)
        record = with_rating(joke, liked)
        self.store.save(record)
        return record

    def more_jokes(self, reference: SingleJoke | TwoPartJoke) -> int:
        """Recommend and rate jokes while the user wants more. Returns how many were rated."""
        rated = 0
        while self.ask_yes_no(MORE_PROMPT):
            # A corrupt ratings file is fatal; only remote failures are retried
            records = self.store.load_all()
            try:
                rec = recommend(
                    self.fetcher,
                    reference,
                    records,
                    threshold=self.threshold,
                    max_attempts=self.max_attempts,
                )
            except (JokeNotFoundError, ParseError) + FETCH_ERRORS as exc:
                self.say(f"could not fetch a recommendation ({exc})")
                continue
            self.rate(rec.joke)
            rated += 1
        return rated

    def report(self) -> UserReport:
        report = self.aggregator.generate(self.store.load_all())
        self.aggregator.persist(report)
        self.say("here is your report")
        self.say(render_report(report))
        return report

    def offer_clear(self) -> bool:
        if self.ask_yes_no(CLEAR_PROMPT):
            self.store.clear()
            self.aggregator.clear()
            log_event("data_cleared", ratings=str(self.store.path), report=str(self.aggregator.path))
            self.say("Data cleared")
            return True
        self.say("Enjoy your jokes :)")
        return False

    def run(self) -> UserReport:
        log_event("session_started")
        joke = self.search()
        reference = self.rate(joke)
        rated = 1 + self.more_jokes(reference)
        report = self.report()
        cleared = self.offer_clear()
        log_event("session_finished", rated=rated, cleared=cleared)
        return report
