from wordrush.config import DEFAULT_SCORING
from wordrush.scoring import score_for, score_word


def test_scores_are_non_decreasing():
    scores = [score_for(n) for n in range(2, 9)]
    assert scores == sorted(scores)


def test_long_words_plateau_at_eight_letters():
    assert score_for(9) == score_for(8) == 20
    assert score_for(15) == 20


def test_table_values():
    assert score_word('cat') == 2
    assert score_word('parts') == 5
    assert score_for(1) == 0


def test_custom_table():
    table = {3: 1, 4: 4}
    assert score_for(2, table) == 0
    assert score_for(6, table) == 4
    assert DEFAULT_SCORING[2] == 1
