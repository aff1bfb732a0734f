"""
Test suite for the wheeled robot drivetrain simulator.

This package contains unit tests organized by component:
- test_geometry.py: Tests for Vector and Point primitives
- test_params.py: Tests for bounded settings and configuration
- test_drivetrain.py: Tests for tank and swerve strategies
- test_body.py: Tests for the body description and arrow scaling
- test_robot.py: Tests for the robot tick, reset and fault handling
- test_simulator.py: Tests for the simulation session and drivetrain switching
- test_canvas.py: Tests for the canvas renderers
"""
