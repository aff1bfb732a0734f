"""
Web application for the wheeled robot drivetrain simulator

Interactive dashboard to drive a tank or swerve robot and watch its wheel vectors.
"""

import logging
from typing import Any, List

import dash
from dash import dcc, html, Input, Output, State
import plotly.graph_objs as go

from drivesim import (
    ControlInput,
    DrivesimError,
    DrivetrainType,
    PlotlyCanvas,
    RobotSettings,
    Simulator,
    SimulatorConfig,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

config = SimulatorConfig()
canvas = PlotlyCanvas(extent=config.canvas_extent, title="Robot")
simulator = Simulator(settings=RobotSettings(), config=config, renderer=canvas)

LABEL_STYLE = {"fontWeight": "bold", "marginBottom": "5px"}
PANEL_STYLE = {"marginBottom": "20px", "padding": "20px", "backgroundColor": "#f5f5f5",
               "borderRadius": "10px"}


def range_slider(component_id: str, label: str, bounded: Any, step: float) -> html.Div:
    """Labelled slider for one bounded setting, starting at its current value"""
    return html.Div([
        html.Label(label, style=LABEL_STYLE),
        dcc.Slider(
            id=component_id,
            min=bounded.minimum,
            max=bounded.maximum,
            step=step,
            value=bounded.value,
            marks=None,
            tooltip={"placement": "bottom", "always_visible": True},
        ),
    ], style={"marginBottom": "15px"})


def control_slider(component_id: str, label: str) -> html.Div:
    """Labelled slider for one operator input axis"""
    return html.Div([
        html.Label(label, style=LABEL_STYLE),
        dcc.Slider(id=component_id, min=-1.0, max=1.0, step=0.05, value=0.0, marks=None,
                   tooltip={"placement": "bottom", "always_visible": False}),
    ], style={"marginBottom": "10px"})


# Initialize Dash app
app = dash.Dash(__name__)
app.title = "Robot Drivetrain Simulator"


def serve_layout() -> html.Div:
    """Build the page from the live simulator state, on every page load"""
    settings = simulator.settings
    return html.Div([
        html.H1("Robot Drivetrain Simulator", style={"textAlign": "center", "marginBottom": "30px"}),

        html.Div([
            html.Div([
                html.Div([
                    html.H3("Robot"),
                    range_slider("max-velocity-slider", "Max Velocity (units/s):",
                                 settings.max_velocity, step=10),
                    range_slider("width-slider", "Robot Width:", settings.robot_width, step=1),
                    range_slider("length-slider", "Robot Length:", settings.robot_length, step=1),
                    html.Label("Drivetrain:", style=LABEL_STYLE),
                    dcc.RadioItems(
                        id="drivetrain-radio",
                        options=[{"label": kind.value, "value": kind.value} for kind in DrivetrainType],
                        value=settings.drivetrain_type.value,
                        inline=True,
                        style={"marginBottom": "15px"},
                    ),
                    html.Button("Reset All", id="reset-button",
                                style={"width": "100%", "padding": "10px", "fontSize": "16px",
                                       "backgroundColor": "#4CAF50", "color": "white",
                                       "border": "none", "borderRadius": "5px", "cursor": "pointer"}),
                ], style=PANEL_STYLE),

                html.Div([
                    html.H3("Tank"),
                    control_slider("left-slider", "Left:"),
                    control_slider("right-slider", "Right:"),
                    html.H3("Swerve"),
                    control_slider("strafe-slider", "Strafe:"),
                    control_slider("forward-slider", "Forward:"),
                    control_slider("rotate-slider", "Rotate:"),
                ], style=PANEL_STYLE),

                html.Div(id="status-message", style={"marginBottom": "10px", "fontSize": "14px"}),
                html.Div(id="tick-message", style={"fontSize": "14px"}),
            ], style={"width": "30%", "display": "inline-block", "verticalAlign": "top",
                      "marginRight": "2%"}),

            html.Div([
                dcc.Graph(id="canvas", config={"displayModeBar": False}),
            ], style={"width": "68%", "display": "inline-block"}),
        ]),

        dcc.Interval(id="tick-interval", interval=config.frame_period_ms, n_intervals=0),
    ], style={"maxWidth": "1400px", "margin": "0 auto", "padding": "20px"})


# Define app layout
app.layout = serve_layout


@app.callback(
    [
        Output("status-message", "children"),
        Output("max-velocity-slider", "value"),
        Output("width-slider", "value"),
        Output("length-slider", "value"),
    ],
    [
        Input("max-velocity-slider", "value"),
        Input("width-slider", "value"),
        Input("length-slider", "value"),
        Input("drivetrain-radio", "value"),
        Input("reset-button", "n_clicks"),
    ],
)
def update_settings(
    max_velocity: float, width: float, length: float, drivetrain: str, n_clicks: int | None
) -> List[Any]:
    """Push slider, radio and reset changes into the simulator"""
    triggered = dash.ctx.triggered_id
    try:
        if triggered == "reset-button":
            simulator.reset_all()
            settings = simulator.settings
            return [
                html.Div("Robot reset to defaults.", style={"color": "green"}),
                settings.max_velocity.value,
                settings.robot_width.value,
                settings.robot_length.value,
            ]

        if triggered == "drivetrain-radio":
            robot = simulator.switch_drivetrain(drivetrain)
            message = f"Switched to {drivetrain} drivetrain ({robot.number_of_wheels} wheels)."
        else:
            simulator.settings.update(
                max_velocity=max_velocity, robot_width=width, robot_length=length
            )
            message = (
                f"Max velocity per frame: {simulator.robot.max_velocity_per_frame:.1f}"
            )
        return [html.Div(message, style={"color": "green"}),
                dash.no_update, dash.no_update, dash.no_update]

    except DrivesimError as e:
        return [html.Div(f"Error: {e}", style={"color": "red"}),
                dash.no_update, dash.no_update, dash.no_update]


@app.callback(
    [Output("canvas", "figure"), Output("tick-message", "children")],
    [Input("tick-interval", "n_intervals")],
    [
        State("left-slider", "value"),
        State("right-slider", "value"),
        State("strafe-slider", "value"),
        State("forward-slider", "value"),
        State("rotate-slider", "value"),
    ],
)
def tick(
    n_intervals: int, left: float, right: float, strafe: float, forward: float, rotate: float
) -> List[Any]:
    """Advance the simulation one frame and redraw the canvas"""
    simulator.set_controls(ControlInput(
        left=left or 0.0,
        right=right or 0.0,
        strafe=strafe or 0.0,
        forward=forward or 0.0,
        rotate=rotate or 0.0,
    ))
    try:
        simulator.step()
    except DrivesimError as e:
        return [dash.no_update, html.Div(f"Error: {e}", style={"color": "red"})]

    figure: go.Figure = canvas.figure(trail=simulator.trail())
    robot = simulator.robot
    status = (
        f"Tick {simulator.tick_count} | x={robot.position.x:.1f} "
        f"y={robot.position.y:.1f} bearing={robot.bearing:.2f} rad"
    )
    if robot.last_error is not None:
        return [figure, html.Div(f"{status} | {robot.last_error}", style={"color": "orange"})]
    return [figure, html.Div(status)]


if __name__ == "__main__":
    logger.info("Starting simulator with %s drivetrain", simulator.settings.drivetrain_type.value)
    app.run(debug=True, port=8050)
