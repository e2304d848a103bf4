from flask import Flask, jsonify, request
from flask_cors import CORS
from dataclasses import asdict, fields
import math

from flange_engine import FlangeCalculator, SEARCH_BOLT_COUNTS, SEARCH_MIN_BOLT_SIZE, evaluate, optimize
from flange_models import FlangeDesignInputs
from flange_pcc1 import check_pcc1, pcc1_defaults
from flange_tables import FACING_SKETCHES, default_tables

app = Flask(__name__)
app.config.update(
    FLANGE_MIN_SEARCH_SIZE=SEARCH_MIN_BOLT_SIZE,
    FLANGE_BOLT_COUNTS=SEARCH_BOLT_COUNTS,
    FLANGE_CORS_ORIGINS='*',
    FLANGE_TABLES=default_tables(),
)
app.config.from_envvar('FLANGE_CALCULATOR_SETTINGS', silent=True)
CORS(app, origins=app.config['FLANGE_CORS_ORIGINS'])

LOAD_FIELDS = ('h_force', 'hp_force', 'wm1', 'wm2', 'total_bolt_load_ambient',
               'total_bolt_load_design', 'available_load', 'required_load')


def inputs_from_payload(data):
    """Build FlangeDesignInputs from a JSON body; unknown keys are ignored."""
    if not isinstance(data, dict):
        raise ValueError('request body must be a JSON object')
    values = {}
    for f in fields(FlangeDesignInputs):
        if f.name not in data or data[f.name] is None:
            continue
        raw = data[f.name]
        if isinstance(f.default, bool):
            values[f.name] = raw if isinstance(raw, bool) else str(raw).lower() in ('1', 'true', 'yes', 'on')
        elif isinstance(f.default, int):
            values[f.name] = int(float(raw))
        elif isinstance(f.default, float):
            values[f.name] = float(raw)
        else:
            values[f.name] = str(raw)
    return FlangeDesignInputs(**values)


def _json_safe(record):
    # JSON has no Infinity; unbounded thresholds go out as null
    return {k: (None if isinstance(v, float) and math.isinf(v) else v) for k, v in record.items()}


def _pcc1_payload(pcc1):
    body = _json_safe(asdict(pcc1))
    body['passed'] = pcc1.passed
    return body


def _tables():
    return app.config['FLANGE_TABLES']


@app.route('/api/reference-tables')
def get_reference_tables():
    return jsonify({**asdict(_tables()), 'facing_sketches': list(FACING_SKETCHES)})


@app.route('/api/evaluate', methods=['POST'])
def evaluate_flange():
    data = request.json
    try:
        inputs = inputs_from_payload(data)
        result = evaluate(inputs, _tables())
        force_unit = data.get('force_unit') or FlangeCalculator.default_force_unit(inputs.pressure_unit)
        body = {
            'inputs': asdict(inputs),
            'result': asdict(result),
            'force_unit': force_unit,
            'loads': {name: FlangeCalculator.convert_force(getattr(result, name), force_unit)
                      for name in LOAD_FIELDS},
        }
        if inputs.use_pcc1_check:
            body['pcc1'] = _pcc1_payload(check_pcc1(inputs, result))
        return jsonify(body)
    except Exception as e:
        app.logger.warning('evaluate failed: %s', e)
        return jsonify({'error': str(e)}), 400


@app.route('/api/optimize', methods=['POST'])
def optimize_bolting():
    data = request.json
    try:
        inputs = inputs_from_payload(data)
        fixed_size_only = bool(data.get('fixed_size_only', False))
        outcome = optimize(inputs, _tables(), fixed_size_only,
                           min_size=app.config['FLANGE_MIN_SEARCH_SIZE'],
                           bolt_counts=tuple(app.config['FLANGE_BOLT_COUNTS']))
        if not outcome.found:
            return jsonify({
                'found': False,
                'candidates_evaluated': outcome.candidates_evaluated,
                'message': 'No bolt size and count satisfies load margin and pitch limits'
            })
        return jsonify({
            'found': True,
            'bolt_size': outcome.bolt_size,
            'bolt_count': outcome.bolt_count,
            'candidates_evaluated': outcome.candidates_evaluated,
            'result': asdict(outcome.result)
        })
    except Exception as e:
        app.logger.warning('optimize failed: %s', e)
        return jsonify({'error': str(e)}), 400


@app.route('/api/pcc1-check', methods=['POST'])
def pcc1_check():
    data = request.json
    try:
        inputs = inputs_from_payload(data)
        result = evaluate(inputs, _tables())
        return jsonify(_pcc1_payload(check_pcc1(inputs, result)))
    except Exception as e:
        app.logger.warning('pcc1 check failed: %s', e)
        return jsonify({'error': str(e)}), 400


@app.route('/api/pcc1-defaults', methods=['POST'])
def pcc1_default_values():
    data = request.json
    try:
        inputs = pcc1_defaults(inputs_from_payload(data), _tables())
        return jsonify(asdict(inputs))
    except Exception as e:
        app.logger.warning('pcc1 defaults failed: %s', e)
        return jsonify({'error': str(e)}), 400


if __name__ == '__main__':
    app.run(debug=True, port=5000)
