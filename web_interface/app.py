"""
Flask web interface for the code generator.

The block editor posts its workspace here and gets generated Zig back.
"""

from flask import Flask, request, jsonify
from flask_cors import CORS
import logging
import os

from visual_codegen import __version__
from visual_codegen.config import GeneratorConfig
from visual_codegen.exceptions import CodegenError, SynthesisError
from visual_codegen.models import Workspace
from visual_codegen.zig import ZigGenerator, build_registry

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

# Emitters are fixed; every request gets its own pass.
registry = build_registry()
base_config = GeneratorConfig.from_env()


@app.route('/api/generate', methods=['POST'])
def generate():
    """Generate code for the posted workspace."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'workspace' not in data:
        return jsonify({
            'success': False,
            'error': 'Request body must be a JSON object with a "workspace" key'
        }), 400

    try:
        overrides = GeneratorConfig.from_dict(data.get('config'))
        config = base_config.merged(**{
            key: value for key, value in overrides.to_dict().items()
            if key in (data.get('config') or {})
        })
        workspace = Workspace.from_dict(data['workspace'])
        code = ZigGenerator(registry, config).workspace_to_code(workspace)
    except SynthesisError as e:
        logger.error("Code generation failed for node %s: %s", e.node_id, e)
        return jsonify({
            'success': False,
            'error': str(e),
            'kind': e.kind,
            'node_id': e.node_id
        }), 422
    except CodegenError as e:
        logger.error("Invalid generate request: %s", e)
        return jsonify({
            'success': False,
            'error': str(e),
            'kind': None,
            'node_id': None
        }), 422

    return jsonify({
        'success': True,
        'code': code
    })


@app.route('/api/kinds', methods=['GET'])
def get_kinds():
    """List every node kind the generator can handle."""
    return jsonify({
        'success': True,
        'data': {
            'language': ZigGenerator.name,
            'kinds': registry.kinds(),
            'categories': registry.categories()
        }
    })


@app.route('/api/test', methods=['GET'])
def test_endpoint():
    """Simple test endpoint."""
    return jsonify({
        'success': True,
        'message': 'Visual Codegen API is working!',
        'version': __version__
    })


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    host = os.environ.get('VISUAL_CODEGEN_HOST', '0.0.0.0')
    port = int(os.environ.get('VISUAL_CODEGEN_PORT', '5003'))

    print("Starting Visual Codegen Web Interface...")
    print(f"Access the API at: http://localhost:{port}")

    app.run(debug=os.environ.get('VISUAL_CODEGEN_DEBUG', '0') == '1', host=host, port=port)
