import pytest

from bluffroom.models import MAX_QUESTIONS, VOTING, WAITING, Question


def test_create_room_returns_unique_four_digit_codes(store, questions):
    codes = {store.create_room(f'host-{i}', questions) for i in range(50)}
    assert len(codes) == 50
    for code in codes:
        assert len(code) == 4 and code.isdigit()
    assert sorted(store.room_codes()) == sorted(codes)


def test_create_room_filters_blank_questions_and_initialises_state(store):
    code = store.create_room('host', [
        Question(text='  ', correct_answer='x'),
        Question(text='Largest ocean?', correct_answer='  Pacific '),
        Question(text='Empty answer', correct_answer=''),
    ])
    room = store.get_room(code)
    assert room.host_id == 'host'
    assert room.phase == WAITING
    assert room.current_question_index == 0
    assert room.players == {}
    assert [(q.text, q.correct_answer) for q in room.questions] == [('Largest ocean?', 'Pacific')]


def test_create_room_rejects_when_nothing_usable(store):
    with pytest.raises(ValueError):
        store.create_room('host', [Question(text='', correct_answer='')])


def test_create_room_caps_question_count(store):
    many = [Question(text=f'Q{i}', correct_answer=f'A{i}') for i in range(MAX_QUESTIONS + 20)]
    code = store.create_room('host', many)
    assert len(store.get_room(code).questions) == MAX_QUESTIONS


def test_get_room_returns_equal_independent_snapshots(store, questions):
    code = store.create_room('host', questions)
    store.add_player(code, 'p1', 'Ann')
    first = store.get_room(code)
    second = store.get_room(code)
    assert first == second
    first.players['p1'].score = 99
    first.phase = VOTING
    assert store.get_room(code) == second


def test_unknown_room_operations_are_noops(store):
    assert store.get_room('0000') is None
    store.update_room('0000', phase=VOTING)
    store.add_player('0000', 'p1', 'Ann')
    store.submit_answer('0000', 'p1', 'hello')
    store.update_score('0000', 'p1', 10)
    store.delete_room('0000')
    assert store.get_player_name('0000', 'p1') is None
    assert store.get_all_answers('0000') == []
    assert store.get_answer_count('0000') == 0
    assert store.get_player_count('0000') == 0
    assert store.get_leaderboard('0000') == []
    assert store.record_vote('0000', 'p1') is False


def test_update_room_merges_fields_and_rejects_unknown_ones(store, questions):
    code = store.create_room('host', questions)
    store.update_room(code, phase=VOTING, current_question_index=1)
    room = store.get_room(code)
    assert room.phase == VOTING
    assert room.current_question_index == 1
    with pytest.raises(KeyError):
        store.update_room(code, colour='blue')


def test_players_and_answers(store, questions):
    code = store.create_room('host', questions)
    store.add_player(code, 'p1', '  Ann ')
    store.add_player(code, 'p2', 'Ben')
    assert store.get_player_name(code, 'p1') == 'Ann'
    assert store.get_player_names(code) == ['Ann', 'Ben']
    assert store.get_player_count(code) == 2

    # Unknown connections cannot submit
    store.submit_answer(code, 'stranger', 'Lyon')
    assert store.get_answer_count(code) == 0

    store.submit_answer(code, 'p1', '  Lyon  ')
    store.submit_answer(code, 'p2', 'Nice')
    assert store.get_all_answers(code) == [
        {'name': 'Ann', 'answer': 'Lyon'},
        {'name': 'Ben', 'answer': 'Nice'},
    ]

    store.remove_player(code, 'p2')
    assert store.get_answer_count(code) == 1
    assert set(store.get_room(code).answers) <= set(store.get_room(code).players)

    store.clear_answers(code)
    assert store.get_answer_count(code) == 0


def test_scores_round_points_and_votes(store, questions):
    code = store.create_room('host', questions)
    store.add_player(code, 'p1', 'Ann')
    store.update_score(code, 'p1', 10)
    store.update_score(code, 'ghost', 10)
    assert store.get_round_scores(code) == [{'name': 'Ann', 'gained': 10}]

    assert store.record_vote(code, 'p1') is True
    assert store.record_vote(code, 'p1') is False

    store.reset_round(code)
    room = store.get_room(code)
    assert room.players['p1'].score == 10
    assert room.players['p1'].round_points == 0
    assert room.players['p1'].has_voted is False


def test_leaderboard_top_three_descending_with_stable_ties(store, questions):
    code = store.create_room('host', questions)
    for sid, name, score in [('a', 'Ann', 10), ('b', 'Ben', 30), ('c', 'Cy', 10), ('d', 'Di', 0)]:
        store.add_player(code, sid, name)
        store.update_score(code, sid, score)
    assert store.get_leaderboard(code) == [
        {'name': 'Ben', 'score': 30},
        {'name': 'Ann', 'score': 10},
        {'name': 'Cy', 'score': 10},
    ]


def test_delete_room_frees_code(store, questions):
    code = store.create_room('host', questions)
    store.delete_room(code)
    assert store.get_room(code) is None
    assert code not in store.room_codes()
