#!/usr/bin/env python3
"""
Flask server for the Spelling Bee puzzle API.
"""

import os
from datetime import datetime
from pathlib import Path

from flask import Flask, request, jsonify
from flask_cors import CORS

from dictionary_registry import (
    DEFAULT_DICT_ID,
    DictionaryRegistry,
    UnknownDictionaryError,
    registry_from_directory,
)
from generate_spelling_bee_puzzle import (
    PuzzleGenerationError,
    pick_random_basis_word,
    word_points,
)
from index_mask_dictionary import (
    MIN_WORD_LENGTH,
    TOTAL_UNIQUE_LETTERS,
    all_words_for_seed,
    is_pangram,
)
from letter_masks import is_alphabetic, mask_to_letters, pop_count, word_to_mask
from puzzle_store import PuzzleStore, PuzzleStoreError, now


ROOT_DIR = Path(__file__).parent
DICTIONARY_DIR = Path(os.environ.get("DICTIONARY_DIR", ROOT_DIR / "data" / "dictionaries"))
PUZZLE_DATA_DIR = Path(os.environ.get("PUZZLE_DATA_DIR", ROOT_DIR / "data" / "puzzles"))
SECONDS_PER_DAY = 24 * 60 * 60
# Bound on random basis-word sampling inside a request
RANDOM_BASIS_TIMEOUT = 5.0


def json_body() -> dict:
    """The request JSON object, or {} if the body is missing or not an object."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def create_app(registry: DictionaryRegistry = None, store: PuzzleStore = None) -> Flask:
    app = Flask(__name__)
    CORS(app)

    registry = registry if registry is not None else registry_from_directory(DICTIONARY_DIR)
    store = store if store is not None else PuzzleStore(PUZZLE_DATA_DIR)
    app.config["REGISTRY"] = registry
    app.config["PUZZLE_STORE"] = store

    @app.errorhandler(UnknownDictionaryError)
    def handle_unknown_dictionary(e):
        return jsonify({"error": "List not found"}), 404

    @app.errorhandler(PuzzleGenerationError)
    def handle_generation_error(e):
        app.logger.warning("Puzzle generation failed: %s", e)
        return jsonify({"error": str(e)}), 422

    @app.errorhandler(PuzzleStoreError)
    def handle_store_error(e):
        return jsonify({"error": str(e)}), 400

    @app.route('/api/v1/dictionaries', methods=['GET'])
    def list_dictionaries():
        return jsonify({"default": DEFAULT_DICT_ID, "dictionaries": registry.ids()})

    @app.route('/api/v1/dictionaries/<dict_id>', methods=['GET'])
    def get_dictionary(dict_id):
        """Return {"id", "name", "words"} for a dictionary."""
        entry = registry.get(dict_id)
        response = jsonify(entry.dictionary.to_dict())
        response.headers["Cache-Control"] = f"max-age={SECONDS_PER_DAY * 365}, immutable"
        return response

    @app.route('/api/v1/dictionaries/<dict_id>/puzzles/create', methods=['POST'])
    def create_puzzle(dict_id):
        """
        Create and save a puzzle.

        Form fields: basis, puzzle_id (or id), created_on (ISO-8601), random.
        Returns: {"puzzleData": {...}}
        """
        entry = registry.get(dict_id)
        basis_word = request.form.get('basis', '').strip()
        puzzle_id = request.form.get('puzzle_id') or request.form.get('id')
        created_on_raw = request.form.get('created_on')
        random_basis = request.form.get('random', '').lower() in ('1', 'true', 'yes', 'on')

        created_on = now()
        if created_on_raw:
            try:
                created_on = datetime.fromisoformat(created_on_raw)
            except ValueError:
                app.logger.warning("Ignoring invalid created_on value: %s", created_on_raw)

        if random_basis:
            basis_word = pick_random_basis_word(entry.words, timeout=RANDOM_BASIS_TIMEOUT)

        if not basis_word:
            return jsonify({"error": "Missing basis word"}), 400

        puzzle_data = store.create_puzzle(entry, basis_word, created_on=created_on, puzzle_id=puzzle_id)
        return jsonify({"puzzleData": puzzle_data})

    @app.route('/api/v1/dictionaries/<dict_id>/solve', methods=['GET'])
    def solve(dict_id):
        """
        Solve an arbitrary puzzle.

        Query: ?letters=eflnors&center=n
        Returns: {"letters", "center", "solutions", "pangrams", "total_words", "max_score"}
        """
        entry = registry.get(dict_id)
        letters = request.args.get('letters', '').strip().lower()
        center = request.args.get('center', '').strip().lower()

        if not letters or not center:
            return jsonify({"error": "Letters and center letter are required"}), 400
        if not is_alphabetic(letters) or not is_alphabetic(center):
            return jsonify({"error": "Letters must only contain a-z"}), 400

        try:
            solutions = all_words_for_seed(letters, center, entry.index, min_len=MIN_WORD_LENGTH)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        distinct = mask_to_letters(word_to_mask(letters))
        pangrams = [w for w in solutions if is_pangram(w, distinct)]
        return jsonify({
            "letters": distinct,
            "center": center,
            "solutions": solutions,
            "pangrams": pangrams,
            "total_words": len(solutions),
            "max_score": sum(word_points(w, w in pangrams) for w in solutions)
        })

    @app.route('/api/v1/puzzles', methods=['GET'])
    def list_puzzles():
        limit = request.args.get('limit', default=7, type=int)
        return jsonify({"puzzles": store.list_puzzles(limit=limit)})

    @app.route('/api/v1/puzzles/<puzzle_id>', methods=['GET'])
    def get_puzzle(puzzle_id):
        puzzle = store.get_puzzle(puzzle_id)
        if puzzle is None:
            return jsonify({"error": "Puzzle not found"}), 404
        return jsonify({"puzzleData": puzzle})

    @app.route('/api/v1/puzzles/<puzzle_id>', methods=['PATCH'])
    def update_puzzle(puzzle_id):
        """
        Expected JSON: {"basisWord": "..."} or
                       {"requiredLetter": "e", "optionalLetters": [...]}
        """
        data = json_body()
        puzzle = store.update_puzzle(
            puzzle_id,
            registry,
            basis_word=data.get('basisWord'),
            required_letter=data.get('requiredLetter'),
            optional_letters=data.get('optionalLetters'),
        )
        if puzzle is None:
            return jsonify({"error": "Puzzle not found"}), 404
        return jsonify({"puzzleData": puzzle})

    @app.route('/api/validate-seed', methods=['POST'])
    def validate_seed():
        """
        Validate a basis word and return its letters.

        Expected JSON: {"seed": "pinwheel"}
        Returns: {"valid": true, "letters": "ehilnpw", "letter_count": 7}
        """
        data = json_body()
        seed = data.get('seed', '')
        if not isinstance(seed, str):
            return jsonify({"error": "Seed must be a string"}), 400
        seed = seed.strip().lower()

        if not seed:
            return jsonify({"error": "Seed word is required"}), 400

        if not is_alphabetic(seed):
            return jsonify({"error": "Seed must contain only letters"}), 400

        mask = word_to_mask(seed)
        letter_count = pop_count(mask)

        if letter_count != TOTAL_UNIQUE_LETTERS:
            return jsonify({
                "error": f"Seed must contain exactly {TOTAL_UNIQUE_LETTERS} distinct letters. Current: {letter_count}"
            }), 400

        return jsonify({
            "valid": True,
            "letters": mask_to_letters(mask),
            "letter_count": letter_count
        })

    @app.route('/api/check-word', methods=['POST'])
    def check_word():
        """
        Check a guess against a stored puzzle.

        Expected JSON: {"word": "pinwheel", "puzzleId": "2024-03-01"}
        Returns: {"valid": true, "message": "Pangram! +15 points", "is_pangram": true, "points": 15}
        """
        data = json_body()
        word = data.get('word', '')
        if not isinstance(word, str):
            return jsonify({"valid": False, "message": "Word must be a string"}), 400
        word = word.strip().lower()
        puzzle = store.get_puzzle(data.get('puzzleId', ''))

        if puzzle is None:
            return jsonify({"error": "Puzzle not found"}), 404

        if not word:
            return jsonify({"valid": False, "message": "Please enter a word"}), 400

        letters = set(puzzle['distinctLetters'])
        center = puzzle['requiredLetter']

        invalid_letters = set(word) - letters
        if invalid_letters:
            return jsonify({
                "valid": False,
                "message": f"Word contains invalid letters: {', '.join(sorted(invalid_letters))}"
            })

        if center not in word:
            return jsonify({
                "valid": False,
                "message": f"Word must contain center letter: {center.upper()}"
            })

        if len(word) < MIN_WORD_LENGTH:
            return jsonify({
                "valid": False,
                "message": f"Word must be at least {MIN_WORD_LENGTH} letters"
            })

        if word not in puzzle['solutions']:
            return jsonify({"valid": False, "message": "Not in word list"})

        pangram = is_pangram(word, puzzle['distinctLetters'])
        points = word_points(word, pangram)
        message = f"Pangram! +{points} points" if pangram else f"Correct! +{points} points"
        return jsonify({
            "valid": True,
            "message": message,
            "is_pangram": pangram,
            "points": points
        })

    return app


if __name__ == '__main__':
    app = create_app()
    print(f"Dictionaries: {', '.join(app.config['REGISTRY'].ids()) or 'none'} (from {DICTIONARY_DIR})")
    print(f"Puzzle data: {PUZZLE_DATA_DIR}")
    app.run(host='0.0.0.0', port=int(os.environ.get("PORT", 5000)))
